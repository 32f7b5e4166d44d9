"""
Wire format for network events.

Each datagram carries exactly one event framed as a 1-byte type tag and a
4-byte big-endian payload length, followed by the event's JSON body.
"""

import struct

from pydantic import ValidationError

from config import MAX_DATAGRAM_SIZE
from network.models import EVENT_TYPES, MESSAGE_TYPES, NetworkEvent

HEADER_FORMAT = "!BI"  # 1-byte type + 4-byte length (big-endian)
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)


class DecodeError(Exception):
    """Raised when a datagram does not hold a known, well-formed event."""


def encode_event(event: NetworkEvent) -> bytes:
    """Serialize an event into a single datagram payload."""
    try:
        msg_type = MESSAGE_TYPES[type(event)]
    except KeyError:
        raise TypeError(f"Not a network event: {type(event).__name__}") from None

    payload = event.model_dump_json().encode("utf-8")
    data = struct.pack(HEADER_FORMAT, msg_type, len(payload)) + payload
    if len(data) > MAX_DATAGRAM_SIZE:
        raise ValueError(f"Encoded event is {len(data)} bytes, limit is {MAX_DATAGRAM_SIZE}")
    return data


def decode_event(data: bytes) -> NetworkEvent:
    """Parse a datagram payload. Raises DecodeError on anything malformed."""
    if len(data) < HEADER_SIZE:
        raise DecodeError(f"Datagram too short: {len(data)} bytes")

    msg_type, length = struct.unpack(HEADER_FORMAT, data[:HEADER_SIZE])
    payload = data[HEADER_SIZE:]
    if len(payload) != length:
        raise DecodeError(f"Payload length mismatch: header says {length}, got {len(payload)}")

    event_cls = EVENT_TYPES.get(msg_type)
    if event_cls is None:
        raise DecodeError(f"Unknown message type {msg_type:#x}")

    try:
        return event_cls.model_validate_json(payload)
    except ValidationError as e:
        raise DecodeError(f"Invalid {event_cls.__name__} payload: {e.error_count()} error(s)") from e
