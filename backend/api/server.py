"""
Live monitor: a small FastAPI app over the running session.

Serves the REST routes and a WebSocket stream of notes and peer changes.
uvicorn runs on its own daemon thread next to the session threads.
"""

import logging

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from api.routes import init_routes, router
from api.websocket import ConnectionManager
from session.threads import start_thread

logger = logging.getLogger(__name__)


def create_app(sender, keyboard, ws_manager: ConnectionManager) -> FastAPI:
    app = FastAPI(title="Piano Session Monitor", version="1.0.0")

    init_routes(sender, keyboard)
    app.include_router(router)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await ws_manager.connect(websocket)
        try:
            while True:
                # Keep the connection alive; we don't expect client messages
                await websocket.receive_text()
        except WebSocketDisconnect:
            await ws_manager.disconnect(websocket)
        except Exception:
            await ws_manager.disconnect(websocket)

    return app


def start_monitor(sender, keyboard, port: int, host: str = "0.0.0.0", on_fatal=None) -> uvicorn.Server:
    """Wire the monitor to the session and serve it in the background."""
    ws_manager = ConnectionManager()
    keyboard.on_note(ws_manager.on_note)
    sender.on_peers_change(ws_manager.on_peers_change)

    app = create_app(sender, keyboard, ws_manager)
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_level="warning"))
    start_thread(server.run, "monitor", on_fatal)
    logger.info(f"Monitor API on {host}:{port}")
    return server
