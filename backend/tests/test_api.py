import numpy as np
import pytest
from fastapi.testclient import TestClient

import meeting_translator.main as main
from meeting_translator.api.deps import get_orchestrator, get_session_directory
from meeting_translator.main import app
from meeting_translator.services.session import MeetingOrchestrator, SessionDirectory

from tests.helpers import fake_pipeline_factory


@pytest.fixture
def directory(connections, glossary_store):
    return SessionDirectory(
        connections,
        glossary=glossary_store,
        pipeline_factory=fake_pipeline_factory(),
        flush_partial_chunk=True,
    )


@pytest.fixture
def client(directory, connections, monkeypatch):
    # Lifespan shutdown and /health read the module-level singletons
    monkeypatch.setattr(main, "session_directory", directory)
    monkeypatch.setattr(main, "connection_manager", connections)
    app.dependency_overrides[get_session_directory] = lambda: directory
    app.dependency_overrides[get_orchestrator] = lambda: MeetingOrchestrator(connections, directory)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _frame(samples):
    return np.asarray(samples, dtype="<f4").tobytes()


# === REST ===

def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"

    health = client.get("/health").json()
    assert health["status"] == "ok"
    assert health["active_room"] is None
    assert health["glossary_version"] == 0


def test_upload_glossary(client, directory):
    r = client.post("/upload-glossary", json={"csv": "en,vn\nhello,xin chao\n,missing"})

    assert r.status_code == 200
    assert r.json() == {"message": "Glossary uploaded", "version": 1, "entries": 1}
    assert dict(directory.glossary.snapshot().entries) == {"hello": "xin chao"}


def test_upload_glossary_with_mac_line_endings(client, directory):
    r = client.post("/upload-glossary", json={"csv": "en,vn\rhello,xin chao"})

    assert r.status_code == 200
    assert r.json()["entries"] == 1
    assert dict(directory.glossary.snapshot().entries) == {"hello": "xin chao"}


@pytest.mark.parametrize("body", [{}, {"csv": None}, {"csv": "  "}])
def test_upload_glossary_without_csv(client, body):
    r = client.post("/upload-glossary", json=body)
    assert r.status_code == 400
    assert r.json()["detail"] == "No CSV provided"


def test_get_glossary_returns_uploaded_csv(client):
    assert client.get("/glossary").status_code == 404

    raw = "en,vn\nhello,xin chao"
    client.post("/upload-glossary", json={"csv": raw})
    r = client.get("/glossary")

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert r.text == raw


# === WebSocket ===

def test_ping_and_invalid_events(client):
    with client.websocket_connect("/ws") as ws:
        assert ws.receive_json()["type"] == "connected"

        ws.send_json({"type": "ping"})
        assert ws.receive_json() == {"type": "pong"}

        ws.send_text("not json")
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"type": "mute"})
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"type": "host-room", "sample_rate": -5})
        assert ws.receive_json()["type"] == "error"


def test_join_without_room(client):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        ws.send_json({"type": "join-room"})
        assert ws.receive_json() == {"type": "no-room"}


def test_host_streams_captions_to_attendee(client):
    with client.websocket_connect("/ws") as host:
        host.receive_json()
        host.send_json({"type": "host-room", "sample_rate": 1000})
        created = host.receive_json()
        assert created["type"] == "room-created"
        assert created["sample_rate"] == 1000

        with client.websocket_connect("/ws") as guest:
            guest.receive_json()
            guest.send_json({"type": "join-room"})
            joined = guest.receive_json()
            assert joined == {"type": "room-joined", "room_id": created["room_id"], "sample_rate": 1000}

            host.send_bytes(_frame(np.full(10, 0.5)))

            audio = guest.receive_json()
            caption = guest.receive_json()
            assert audio["type"] == "audio-stream"
            assert audio["sequence"] == 0
            assert caption["type"] == "translated-caption"
            assert caption["sequence"] == 0
            assert caption["translation"] == f"vi:{caption['transcript']}"


def test_end_stream_flushes_partial_chunk(client):
    with client.websocket_connect("/ws") as host:
        host.receive_json()
        host.send_json({"type": "host-room", "sample_rate": 1000})
        host.receive_json()

        host.send_bytes(_frame(np.zeros(4)))
        host.send_json({"type": "end-stream", "flush": True})

        assert host.receive_json()["type"] == "audio-stream"
        assert host.receive_json()["type"] == "translated-caption"


def test_attendee_cannot_end_stream_or_send_malformed_audio(client):
    with client.websocket_connect("/ws") as host:
        host.receive_json()
        host.send_json({"type": "host-room"})
        host.receive_json()

        with client.websocket_connect("/ws") as guest:
            guest.receive_json()
            guest.send_json({"type": "join-room"})
            guest.receive_json()

            guest.send_json({"type": "end-stream"})
            assert guest.receive_json()["type"] == "error"

            guest.send_bytes(b"\x00\x00\x80")
            assert guest.receive_json() == {"type": "error", "message": "Malformed audio frame"}
