"""Application-wide configuration: defaults and command-line options."""

import argparse
import ipaddress
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

# --- Networking ---
DEFAULT_RECEIVER_ADDRESS = "0.0.0.0:9999"
DEFAULT_SENDER_ADDRESS = "0.0.0.0:9998"
DEFAULT_HOST_ADDRESS = "127.0.0.1:9999"
MAX_DATAGRAM_SIZE = 1400  # bytes, stays below a typical Ethernet MTU

# --- Keyboard ---
DEFAULT_SEQUENCE = 2
MAX_SEQUENCE = 5
DEFAULT_VOLUME = 1.0
DEFAULT_NOTE_DURATION = 0  # ms, 0 plays the natural length
DEFAULT_MARK_DURATION = 500  # ms
DEFAULT_TEMPO = 1.0

# --- Input ---
POLL_TIMEOUT = 0.0005  # seconds

# --- Storage ---
CONFIG_DIR = Path.home() / ".piano-session"
LOG_FILE = CONFIG_DIR / "session.log"


class ConfigError(Exception):
    """Raised when the startup configuration is invalid."""


def parse_address(value: str) -> tuple[str, int]:
    """Parse ``ip:port`` into an ``(ip, port)`` tuple. Sockets are IPv4 only."""
    host, sep, port = value.strip().rpartition(":")
    if not sep or not host:
        raise ValueError(f"expected host:port, got {value!r}")
    try:
        ipaddress.IPv4Address(host)
    except ValueError:
        raise ValueError(f"invalid IPv4 address in {value!r}") from None
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ValueError(f"invalid port in {value!r}")
    return host, int(port)


class Options(BaseModel):
    """Fully validated session configuration."""
    receiver_address: tuple[str, int]
    sender_address: tuple[str, int]
    host_address: tuple[str, int]
    sequence: int = Field(default=DEFAULT_SEQUENCE, ge=0, le=MAX_SEQUENCE)
    volume: float = Field(default=DEFAULT_VOLUME, ge=0.0, le=1.0)
    note_duration: int = Field(default=DEFAULT_NOTE_DURATION, ge=0)
    mark_duration: int = Field(default=DEFAULT_MARK_DURATION, ge=0)
    record_file: Path | None = None
    play_file: Path | None = None
    play_file_tempo: float = DEFAULT_TEMPO
    monitor_port: int | None = Field(default=None, gt=0, lt=65536)
    headless: bool = False
    log_file: Path | None = None
    log_level: str = "INFO"

    @field_validator("receiver_address", "sender_address", "host_address", mode="before")
    @classmethod
    def validate_address(cls, value):
        if isinstance(value, str):
            return parse_address(value)
        return value

    @field_validator("play_file_tempo")
    @classmethod
    def validate_tempo(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("tempo must be greater than zero")
        return value

    @field_validator("play_file")
    @classmethod
    def validate_play_file(cls, value: Path | None) -> Path | None:
        if value is not None and not value.is_file():
            raise ValueError(f"play file not found: {value}")
        return value

    @field_validator("record_file")
    @classmethod
    def validate_record_file(cls, value: Path | None) -> Path | None:
        if value is not None and not value.parent.resolve().is_dir():
            raise ValueError(f"record file directory does not exist: {value.parent}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="piano-session",
        description="Play a shared virtual piano keyboard with peers on the network.",
    )
    parser.add_argument("-r", "--receiver-address", default=DEFAULT_RECEIVER_ADDRESS,
                        help="Address to receive note events on.")
    parser.add_argument("-s", "--sender-address", default=DEFAULT_SENDER_ADDRESS,
                        help="Address to send note events from.")
    parser.add_argument("-H", "--host-address", default=DEFAULT_HOST_ADDRESS,
                        help="Address of the session host to join.")
    parser.add_argument("--sequence", type=int, default=DEFAULT_SEQUENCE,
                        help=f"Starting octave, 0 to {MAX_SEQUENCE}.")
    parser.add_argument("-v", "--volume", type=float, default=DEFAULT_VOLUME,
                        help="Initial volume, 0.0 to 1.0. Passed to the renderer with each note; there is no audio output.")
    parser.add_argument("-n", "--note-duration", type=int, default=DEFAULT_NOTE_DURATION,
                        help="Note duration in ms (0 plays the natural length).")
    parser.add_argument("-m", "--mark-duration", type=int, default=DEFAULT_MARK_DURATION,
                        help="How long a played key stays highlighted, in ms.")
    parser.add_argument("--record-file", type=Path, help="Write played notes to this file.")
    parser.add_argument("--play-file", type=Path, help="Play notes from this file.")
    parser.add_argument("-t", "--play-file-tempo", type=float, default=DEFAULT_TEMPO,
                        help="Playback speed multiplier for --play-file.")
    parser.add_argument("--monitor-port", type=int,
                        help="Serve the live monitor API on this port.")
    parser.add_argument("--headless", action="store_true",
                        help="Run without the terminal keyboard.")
    parser.add_argument("--log-file", type=Path, help="Write logs to this file.")
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser


def load_options(argv: list[str] | None = None) -> Options:
    """Parse and validate command-line options. Raises ConfigError."""
    args = build_parser().parse_args(argv)
    try:
        return Options(**vars(args))
    except ValidationError as e:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(messages) from e
