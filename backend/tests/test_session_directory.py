import numpy as np
import pytest

from meeting_translator.services.session import SessionDirectory

from tests.helpers import FakeTranslationEngine, FakeWebSocket, fake_pipeline_factory


async def _connect(connections, connection_id, **kwargs):
    websocket = FakeWebSocket(**kwargs)
    await connections.connect(websocket, connection_id)
    return websocket


@pytest.fixture
def factory():
    return fake_pipeline_factory()


@pytest.fixture
def directory(connections, glossary_store, factory):
    return SessionDirectory(
        connections,
        glossary=glossary_store,
        pipeline_factory=factory,
        flush_partial_chunk=True,
    )


@pytest.mark.asyncio
async def test_create_opens_room_with_host(directory, connections):
    await _connect(connections, "host")

    session = await directory.create("host", sample_rate=1000)

    assert len(session.id) == 6
    assert session.host_id == "host"
    assert session.sample_rate == 1000
    assert session.pipeline.is_running
    assert connections.get_room_members(session.id) == ["host"]
    assert directory.is_host("host")

    await directory.shutdown()


@pytest.mark.asyncio
async def test_join_without_room_returns_none(directory, connections):
    await _connect(connections, "guest")
    assert await directory.join("guest") is None


@pytest.mark.asyncio
async def test_hosting_again_closes_previous_room(directory, connections, factory):
    host_socket = await _connect(connections, "host")
    guest_socket = await _connect(connections, "guest")

    first = await directory.create("host", sample_rate=1000)
    await directory.join("guest")
    second = await directory.create("host", sample_rate=1000)

    assert second is not first
    assert not factory.created[0].is_running
    closed = guest_socket.events("room-closed")
    assert closed and closed[0]["room_id"] == first.id
    assert host_socket.events("room-closed")
    assert connections.get_room_members(second.id) == ["host"]

    await directory.shutdown()


@pytest.mark.asyncio
async def test_captions_reach_host_and_attendees(directory, connections):
    host_socket = await _connect(connections, "host")
    guest_socket = await _connect(connections, "guest")
    await directory.create("host", sample_rate=1000)
    await directory.join("guest")

    assert directory.submit_audio_frame("host", np.zeros(10)) == 1
    await directory.shutdown()

    for socket in (host_socket, guest_socket):
        assert len(socket.events("audio-stream")) == 1
        caption = socket.events("translated-caption")[0]
        assert caption["sequence"] == 0
        assert caption["translation"].startswith("vi:")


@pytest.mark.asyncio
async def test_audio_from_attendee_is_ignored(directory, connections):
    await _connect(connections, "host")
    await _connect(connections, "guest")
    await directory.create("host", sample_rate=1000)
    await directory.join("guest")

    assert directory.submit_audio_frame("guest", np.zeros(10)) == 0
    assert not directory.end_stream("guest")

    await directory.shutdown()


@pytest.mark.asyncio
async def test_host_leaving_flushes_tail_to_attendees(directory, connections):
    await _connect(connections, "host")
    guest_socket = await _connect(connections, "guest")
    session = await directory.create("host", sample_rate=1000)
    await directory.join("guest")

    directory.submit_audio_frame("host", np.zeros(4))
    await directory.leave("host")

    assert session.host_id is None
    assert connections.get_room_members(session.id) == ["guest"]

    await session.pipeline.stop(timeout=5)
    assert len(guest_socket.events("translated-caption")) == 1


@pytest.mark.asyncio
async def test_attendee_leave_stops_delivery(directory, connections):
    host_socket = await _connect(connections, "host")
    guest_socket = await _connect(connections, "guest")
    session = await directory.create("host", sample_rate=1000)
    await directory.join("guest")

    await directory.leave("guest")
    directory.submit_audio_frame("host", np.zeros(10))
    await directory.shutdown()

    assert "guest" not in session.attendee_ids
    assert guest_socket.events("translated-caption") == []
    assert len(host_socket.events("translated-caption")) == 1


@pytest.mark.asyncio
async def test_glossary_upload_before_room_applies_to_pipeline(connections, glossary_store):
    translator = FakeTranslationEngine()
    directory = SessionDirectory(
        connections,
        glossary=glossary_store,
        pipeline_factory=fake_pipeline_factory(translation_engine=translator),
    )
    directory.glossary.replace("en,vn\nsprint,giai doan")

    await _connect(connections, "host")
    await directory.create("host", sample_rate=1000)
    directory.submit_audio_frame("host", np.zeros(10))
    await directory.shutdown()

    assert translator.calls[0]["glossary_instruction"] == '"sprint" → "giai doan"'


@pytest.mark.asyncio
async def test_broadcast_skips_broken_sockets(directory, connections):
    await _connect(connections, "host")
    await _connect(connections, "guest", fail=True)
    session = await directory.create("host", sample_rate=1000)
    await directory.join("guest")

    sent = await directory.broadcast(session.id, "translated-caption", {"sequence": 0})

    assert sent == 1
    await directory.shutdown()
