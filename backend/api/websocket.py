"""WebSocket handler for live session events."""

import asyncio
import json
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def log_publish_failure(future) -> None:
    """Done-callback for broadcasts scheduled from the session threads."""
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error(f"Monitor broadcast error: {error}")


class ConnectionManager:
    """Manages WebSocket connections and broadcasts session events."""

    def __init__(self) -> None:
        self._connections: list[WebSocket] = []
        self._lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._loop = asyncio.get_running_loop()
        async with self._lock:
            self._connections.append(websocket)
        logger.info(f"Monitor client connected. Total: {len(self._connections)}")

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            if websocket in self._connections:
                self._connections.remove(websocket)
        logger.info(f"Monitor client disconnected. Total: {len(self._connections)}")

    async def broadcast(self, event: str, data) -> None:
        """Broadcast an event to all connected WebSocket clients."""
        message = json.dumps({"event": event, "data": data})
        async with self._lock:
            dead: list[WebSocket] = []
            for ws in self._connections:
                try:
                    await ws.send_text(message)
                except Exception:
                    dead.append(ws)
            for ws in dead:
                self._connections.remove(ws)

    def publish(self, event: str, data) -> None:
        """Thread-safe broadcast from the session threads. No-op until a client connects."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        future = asyncio.run_coroutine_threadsafe(self.broadcast(event, data), loop)
        future.add_done_callback(log_publish_failure)

    def on_note(self, note) -> None:
        """Callback compatible with PianoKeyboard.on_note()."""
        self.publish("note", note.model_dump(mode="json"))

    def on_peers_change(self, peers) -> None:
        """Callback compatible with Sender.on_peers_change()."""
        self.publish("peers", [f"{host}:{port}" for host, port in peers])
