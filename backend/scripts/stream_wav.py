"""
Stream a WAV file into a running backend as the host and print the
captions an attendee receives.

    python scripts/stream_wav.py meeting.wav --glossary terms.csv
"""
import argparse
import asyncio
import json
import logging
import os
import wave

import httpx
import numpy as np
import websockets

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

BASE_URL = os.getenv("BASE_URL", "http://localhost:5000")
WS_URL = os.getenv("WS_URL", "ws://localhost:5000/ws")

FRAME_SAMPLES = 4096
IDLE_TIMEOUT_SEC = 30


def load_wav(path):
    with wave.open(path, "rb") as wav:
        if wav.getsampwidth() != 2:
            raise ValueError("Only 16-bit PCM WAV files are supported")
        rate = wav.getframerate()
        channels = wav.getnchannels()
        pcm = np.frombuffer(wav.readframes(wav.getnframes()), dtype="<i2")

    if channels > 1:
        pcm = pcm.reshape(-1, channels).mean(axis=1)
    return pcm.astype(np.float32) / 32768.0, rate


async def upload_glossary(path):
    with open(path, encoding="utf-8") as f:
        raw = f.read()
    async with httpx.AsyncClient() as client:
        resp = await client.post(f"{BASE_URL}/upload-glossary", json={"csv": raw})
        if resp.status_code != 200:
            logger.error(f"Glossary upload failed: {resp.status_code} {resp.text}")
            return
        logger.info(f"Glossary uploaded: {resp.json()}")


async def attend(room_ready: asyncio.Event):
    async with websockets.connect(WS_URL) as ws:
        await ws.recv()  # connected
        await room_ready.wait()
        await ws.send(json.dumps({"type": "join-room"}))

        while True:
            try:
                message = json.loads(await asyncio.wait_for(ws.recv(), timeout=IDLE_TIMEOUT_SEC))
            except asyncio.TimeoutError:
                logger.info("No more captions")
                return

            if message["type"] == "translated-caption":
                logger.info(f"#{message['sequence']} {message['transcript']!r} -> {message['translation']!r}")
            elif message["type"] in ("room-closed", "no-room"):
                logger.info(f"Room unavailable: {message['type']}")
                return


async def host(samples, rate, room_ready: asyncio.Event):
    async with websockets.connect(WS_URL) as ws:
        await ws.recv()  # connected
        await ws.send(json.dumps({"type": "host-room", "sample_rate": rate}))
        created = json.loads(await ws.recv())
        if created["type"] != "room-created":
            logger.error(f"Could not host: {created}")
            return
        logger.info(f"Hosting room {created['room_id']} at {rate}Hz")
        room_ready.set()

        # Pace frames at capture speed
        frame_seconds = FRAME_SAMPLES / rate
        for start in range(0, len(samples), FRAME_SAMPLES):
            frame = samples[start:start + FRAME_SAMPLES]
            await ws.send(frame.astype("<f4").tobytes())
            await asyncio.sleep(frame_seconds)

        await ws.send(json.dumps({"type": "end-stream", "flush": True}))
        logger.info("Finished streaming")


async def main():
    parser = argparse.ArgumentParser(description="Stream a WAV file as the meeting host")
    parser.add_argument("wav", help="Path to a 16-bit PCM WAV file")
    parser.add_argument("--glossary", help="Optional glossary CSV to upload first")
    args = parser.parse_args()

    if args.glossary:
        await upload_glossary(args.glossary)

    samples, rate = load_wav(args.wav)
    logger.info(f"Loaded {len(samples) / rate:.1f}s of audio")

    room_ready = asyncio.Event()
    await asyncio.gather(attend(room_ready), host(samples, rate, room_ready))


if __name__ == "__main__":
    asyncio.run(main())
