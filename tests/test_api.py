import concurrent.futures
import logging
import time

import pytest
from fastapi.testclient import TestClient

from api.server import create_app
from api.websocket import ConnectionManager, log_publish_failure
from game.models import Color, Note


@pytest.fixture
def client(sender, keyboard):
    return TestClient(create_app(sender, keyboard, ConnectionManager()))


def test_peers_route(client, sender):
    sender.replace_peers(5000, [("0.0.0.0", 0), ("10.0.0.2", 9000)], "9.9.9.9")
    response = client.get("/api/peers")
    assert response.status_code == 200
    assert response.json() == {
        "host": "127.0.0.1:9999",
        "peers": [
            {"slot": 0, "address": "9.9.9.9:5000"},
            {"slot": 1, "address": "10.0.0.2:9000"},
        ],
    }


def test_keyboard_route(client, keyboard):
    keyboard.set_note_color(Color.RED)
    data = client.get("/api/keyboard").json()
    assert data["color"] == "red"
    assert data["sequence"] == 3


def test_websocket_streams_notes(sender, keyboard):
    manager = ConnectionManager()
    keyboard.on_note(manager.on_note)
    client = TestClient(create_app(sender, keyboard, manager))
    with client.websocket_connect("/ws") as ws:
        deadline = time.monotonic() + 5
        while manager.connection_count == 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        keyboard.play_note(Note(pitch="c4", color=Color.GREEN))
        message = ws.receive_json()
    assert message["event"] == "note"
    assert message["data"]["pitch"] == "c4"
    assert message["data"]["color"] == "green"


def test_publish_without_clients_is_noop():
    ConnectionManager().publish("note", {})


def test_failed_broadcast_is_logged(caplog):
    future = concurrent.futures.Future()
    future.set_exception(RuntimeError("socket closed"))
    with caplog.at_level(logging.ERROR, logger="api.websocket"):
        log_publish_failure(future)
    assert "Monitor broadcast error: socket closed" in caplog.text


def test_successful_broadcast_logs_nothing(caplog):
    future = concurrent.futures.Future()
    future.set_result(None)
    with caplog.at_level(logging.ERROR, logger="api.websocket"):
        log_publish_failure(future)
    assert caplog.text == ""
