"""Pydantic models for the note-synchronization wire protocol."""

import ipaddress
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from game.models import Note

Address = tuple[str, int]


def validate_ipv4(value: str) -> str:
    ipaddress.IPv4Address(value)
    return value


Port = Annotated[int, Field(ge=0, le=65535)]
IPv4Host = Annotated[str, AfterValidator(validate_ipv4)]
PeerAddress = tuple[IPv4Host, Port]


class MessageType:
    PLAYER_JOIN = 0x01
    PEERS = 0x02
    ID = 0x03
    NOTE = 0x04


class PlayerJoin(BaseModel):
    """Sent to the host by a participant that wants to join."""
    port: Port  # the joiner's receiving port


class Peers(BaseModel):
    """The host's full peer list. Slot 0 is the host itself."""
    port: Port  # the host's receiving port
    peers: list[PeerAddress]


class PlayerId(BaseModel):
    """Assigns the receiving participant its color identity."""
    id: int = Field(ge=0)


class NoteEvent(BaseModel):
    """A note played by a remote participant."""
    note: Note


NetworkEvent = PlayerJoin | Peers | PlayerId | NoteEvent

EVENT_TYPES: dict[int, type[BaseModel]] = {
    MessageType.PLAYER_JOIN: PlayerJoin,
    MessageType.PEERS: Peers,
    MessageType.ID: PlayerId,
    MessageType.NOTE: NoteEvent,
}

MESSAGE_TYPES: dict[type[BaseModel], int] = {cls: tag for tag, cls in EVENT_TYPES.items()}


class ReceivedEvent(BaseModel):
    """A decoded event together with the UDP address it arrived from."""
    event: NetworkEvent
    src: Address
