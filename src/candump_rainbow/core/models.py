"""
Data models for CAN frame decoding and candump log parsing.

These dataclasses provide immutable representations of:
- Signal and message descriptors built from a DBC database
- Raw CAN frames as delivered by a bus or a log
- Decoded signal values
- Parsed candump log entries
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import can

# Largest 11-bit standard frame id
STANDARD_ID_MAX = 0x7FF


class ByteOrder(Enum):
    """Signal byte order, spelled the way cantools spells it."""

    LITTLE_ENDIAN = "little_endian"
    BIG_ENDIAN = "big_endian"

    @property
    def byteorder(self) -> str:
        """Return the name ``int.from_bytes`` expects."""
        return "little" if self is ByteOrder.LITTLE_ENDIAN else "big"


@dataclass(frozen=True, slots=True)
class SignalDescriptor:
    """
    A named bit field within a message payload.

    Physical values are computed using DBC scaling:
    physical = raw * factor + offset
    """

    name: str
    start_bit: int  # Bit offset within the 64-bit payload
    length: int  # Width in bits
    byte_order: ByteOrder = ByteOrder.LITTLE_ENDIAN
    factor: float = 1.0
    offset: float = 0.0
    is_signed: bool = False
    unit: str = ""

    @property
    def end_bit(self) -> int:
        """Return the first bit past this signal."""
        return self.start_bit + self.length

    @property
    def mask(self) -> int:
        return (1 << self.length) - 1


@dataclass(frozen=True, slots=True)
class MessageDescriptor:
    """
    A DBC message and its signals, keyed by the stripped identifier.
    """

    message_id: int
    name: str
    signals: tuple[SignalDescriptor, ...] = ()
    is_extended: bool = False

    @property
    def hex_id(self) -> str:
        """Return message ID as hex string."""
        return f"0x{self.message_id:03X}"

    @property
    def signal_names(self) -> list[str]:
        return [sig.name for sig in self.signals]


@dataclass(frozen=True, slots=True)
class RawFrame:
    """
    A single CAN frame as received from a bus or read from a log.

    The payload length is authoritative; frames are never padded.
    """

    identifier: int  # May carry the extended-frame flag
    is_extended: bool
    payload: bytes
    timestamp: float = 0.0
    is_error_frame: bool = False
    is_remote_frame: bool = False

    @classmethod
    def from_can_message(cls, msg: "can.Message") -> "RawFrame":
        """Build a frame from a python-can message."""
        return cls(
            identifier=msg.arbitration_id,
            is_extended=msg.is_extended_id,
            payload=bytes(msg.data),
            timestamp=msg.timestamp,
            is_error_frame=msg.is_error_frame,
            is_remote_frame=msg.is_remote_frame,
        )

    @property
    def hex_data(self) -> str:
        """Return data as hex string."""
        return " ".join(f"{b:02x}" for b in self.payload)


@dataclass(frozen=True, slots=True)
class DecodedSignal:
    """
    Represents a decoded CAN signal with both raw and physical values.
    """

    signal_name: str
    physical_value: float
    raw_value: int
    unit: str = ""

    def as_pair(self) -> tuple[str, float]:
        """Return the (signal_name, physical_value) pair."""
        return (self.signal_name, self.physical_value)


@dataclass(frozen=True, slots=True)
class Timestamp:
    """Seconds and sub-second digits exactly as printed in the log."""

    seconds: int
    nanos: int


@dataclass(frozen=True, slots=True)
class LogEntry:
    """
    One parsed candump log line.

    ``frame_body`` is the payload hex literal read as a single big-endian
    integer; ``body_digits`` remembers how many hex digits were written so
    leading zero bytes can be recovered. ``id_digits`` does the same for
    the frame id, since candump writes extended ids with 8 digits.
    """

    timestamp: Timestamp
    interface: str
    frame_id: int
    frame_body: int
    body_digits: int = 0
    id_digits: int = 0

    @property
    def is_extended(self) -> bool:
        """True when the id was written with more than 3 digits or needs 29 bits."""
        return self.id_digits > 3 or self.frame_id > STANDARD_ID_MAX

    @property
    def payload(self) -> bytes:
        """Return the frame body as bytes, including leading zeros."""
        length = (self.body_digits + 1) // 2
        return self.frame_body.to_bytes(length, "big")
