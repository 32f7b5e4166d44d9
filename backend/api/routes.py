"""Read-only REST routes for the live monitor."""

import logging

from fastapi import APIRouter, HTTPException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# These will be injected at startup
_sender = None
_keyboard = None


def init_routes(sender, keyboard) -> None:
    """Inject session objects into the routes module."""
    global _sender, _keyboard
    _sender = sender
    _keyboard = keyboard


@router.get("/peers")
async def list_peers():
    """Return the peer directory, host first."""
    if _sender is None:
        raise HTTPException(status_code=503, detail="Session not started")
    peers = _sender.peers()
    return {
        "host": f"{_sender.host_address[0]}:{_sender.host_address[1]}",
        "peers": [{"slot": i, "address": f"{host}:{port}"} for i, (host, port) in enumerate(peers)],
    }


@router.get("/keyboard")
async def keyboard_state():
    """Return the local keyboard's color, octave and volume."""
    if _keyboard is None:
        raise HTTPException(status_code=503, detail="Session not started")
    return _keyboard.state().model_dump(mode="json")
