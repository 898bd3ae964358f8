import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import numpy as np
import pytest

from meeting_translator.services.audio.pcm import decode_wav
from meeting_translator.services.audio.transcoder import (
    FFmpegTranscoder,
    NumpyTranscoder,
    build_transcoder,
)
from meeting_translator.services.exceptions import ProcessError


@pytest.mark.asyncio
async def test_numpy_transcoder_downsamples_to_16k_wav():
    pcm = np.zeros(48000, dtype="<i2").tobytes()

    waveform = await NumpyTranscoder().transcode(pcm, 48000)

    samples, rate = decode_wav(waveform)
    assert rate == 16000
    assert len(samples) == 16000


@pytest.mark.asyncio
async def test_numpy_transcoder_is_identity_at_target_rate():
    original = np.array([0, 100, -100, 32767], dtype=np.int16)

    samples, rate = decode_wav(await NumpyTranscoder().transcode(original.tobytes(), 16000))

    assert rate == 16000
    assert samples.tolist() == original.tolist()


def test_numpy_resample_preserves_constant_signal():
    resampled = NumpyTranscoder().resample(np.full(300, 1234, dtype=np.int16), 48000)
    assert len(resampled) == 100
    assert set(resampled.tolist()) == {1234}


@pytest.mark.asyncio
async def test_numpy_transcoder_rejects_invalid_input():
    transcoder = NumpyTranscoder()
    with pytest.raises(ProcessError):
        await transcoder.transcode(b"\x00\x00", 0)
    with pytest.raises(ProcessError):
        await transcoder.transcode(b"\x00", 48000)


def test_ffmpeg_arguments_describe_raw_pcm_pipes():
    args = FFmpegTranscoder(binary="ffmpeg")._build_args(44100)
    assert args[0] == "ffmpeg"
    assert args[args.index("-i") + 1] == "pipe:0"
    assert args[-1] == "pipe:1"
    assert "44100" in args and "16000" in args


@pytest.mark.asyncio
async def test_ffmpeg_missing_binary_raises_process_error():
    transcoder = FFmpegTranscoder(binary="/nonexistent/ffmpeg-binary")
    with pytest.raises(ProcessError):
        await transcoder.transcode(b"\x00\x00" * 10, 48000)


@pytest.mark.asyncio
async def test_ffmpeg_nonzero_exit_carries_returncode_and_stderr():
    process = SimpleNamespace(
        returncode=1,
        communicate=AsyncMock(return_value=(b"", b"Invalid data found\n")),
    )
    with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
        with pytest.raises(ProcessError) as exc_info:
            await FFmpegTranscoder().transcode(b"\x00\x00", 48000)

    assert exc_info.value.returncode == 1
    assert exc_info.value.stderr == "Invalid data found"


@pytest.mark.asyncio
async def test_ffmpeg_output_is_wrapped_in_wav():
    resampled = np.array([1, 2, 3], dtype="<i2").tobytes()
    process = SimpleNamespace(
        returncode=0,
        communicate=AsyncMock(return_value=(resampled, b"")),
    )
    with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)) as spawn:
        waveform = await FFmpegTranscoder().transcode(b"\x00\x00" * 3, 48000)

    samples, rate = decode_wav(waveform)
    assert rate == 16000
    assert samples.tolist() == [1, 2, 3]
    process.communicate.assert_awaited_once_with(b"\x00\x00" * 3)
    assert spawn.await_count == 1


def _settings(name, binary="ffmpeg"):
    return SimpleNamespace(TRANSCODER=name, FFMPEG_BINARY=binary, TRANSCODE_TIMEOUT_SEC=12.5)


def test_build_transcoder_by_name():
    assert isinstance(build_transcoder(_settings("numpy")), NumpyTranscoder)
    ffmpeg = build_transcoder(_settings("FFmpeg", "/usr/bin/ffmpeg"))
    assert isinstance(ffmpeg, FFmpegTranscoder)
    assert ffmpeg.binary == "/usr/bin/ffmpeg"
    assert ffmpeg.timeout == 12.5
    with pytest.raises(ValueError):
        build_transcoder(_settings("sox"))


@pytest.mark.asyncio
async def test_ffmpeg_hung_process_is_killed_after_timeout():
    async def never_finishes(_pcm):
        await asyncio.sleep(30)

    process = SimpleNamespace(
        returncode=None,
        communicate=never_finishes,
        kill=MagicMock(),
        wait=AsyncMock(return_value=-9),
    )
    with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
        with pytest.raises(ProcessError, match="timed out"):
            await FFmpegTranscoder(timeout=0.05).transcode(b"\x00\x00", 48000)

    process.kill.assert_called_once()
    process.wait.assert_awaited_once()
