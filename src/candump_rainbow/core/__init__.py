"""Core modules for DBC catalogs, signal decoding, and candump log parsing."""

from .models import (
    ByteOrder,
    DecodedSignal,
    LogEntry,
    MessageDescriptor,
    RawFrame,
    SignalDescriptor,
    Timestamp,
)
from .errors import (
    CANDumpError,
    InvalidCatalog,
    ParseError,
    ShortFrame,
    UnknownMessage,
)
from .catalog import CAN_EFF_FLAG, SignalCatalog, normalize_id
from .decoder import (
    FRAME_LENGTH,
    SignalDecoder,
    decode_payload,
    decode_signals,
)
from .parser import format_line, iter_log, parse_line, parse_prefix
from .stats import BusStatistics

__all__ = [
    "ByteOrder",
    "DecodedSignal",
    "LogEntry",
    "MessageDescriptor",
    "RawFrame",
    "SignalDescriptor",
    "Timestamp",
    "CANDumpError",
    "InvalidCatalog",
    "ParseError",
    "ShortFrame",
    "UnknownMessage",
    "CAN_EFF_FLAG",
    "SignalCatalog",
    "normalize_id",
    "FRAME_LENGTH",
    "SignalDecoder",
    "decode_payload",
    "decode_signals",
    "format_line",
    "iter_log",
    "parse_line",
    "parse_prefix",
    "BusStatistics",
]
