"""
Parser for candump text log lines.

Line format (as written by ``candump -l``)::

    (1547046014.597158) vcan0 7B#1C7

Each grammar rule consumes and validates its own piece of the line; the
first rule that fails aborts the parse with a ParseError that names the
rule and keeps the unconsumed input for diagnostics.
"""

import re
from typing import Iterable, Iterator

from ..utils.logging_config import get_logger
from .errors import ParseError
from .models import LogEntry, Timestamp

logger = get_logger("parser")

U32_MAX = 0xFFFFFFFF
U64_MAX = 0xFFFFFFFFFFFFFFFF

# ASCII-only classes; \d and \w would also match non-ASCII digits/letters
_DIGITS = re.compile(r"[0-9]+")
_ALNUM = re.compile(r"[A-Za-z0-9]+")
_HEX = re.compile(r"[0-9A-Fa-f]+")
_SPACES = re.compile(r"[ \t]*")


class _Cursor:
    """Position in the line being parsed."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def fail(self, rule: str, reason: str | None = None) -> ParseError:
        return ParseError(self.text, rule, self.pos, reason)

    def tag(self, literal: str, rule: str) -> None:
        if not self.text.startswith(literal, self.pos):
            raise self.fail(rule, f"expected {literal!r}")
        self.pos += len(literal)

    def take(self, pattern: re.Pattern, rule: str) -> str:
        match = pattern.match(self.text, self.pos)
        if match is None or not match.group():
            raise self.fail(rule)
        self.pos = match.end()
        return match.group()

    def skip_spaces(self) -> None:
        self.pos = _SPACES.match(self.text, self.pos).end()

    def number(self, pattern: re.Pattern, rule: str, base: int, limit: int) -> tuple[int, int]:
        """Consume a number and return (value, digit count)."""
        start = self.pos
        digits = self.take(pattern, rule)
        significant = digits.lstrip("0") or "0"
        max_digits = len(f"{limit:x}") if base == 16 else len(str(limit))
        if len(significant) > max_digits or int(significant, base) > limit:
            self.pos = start
            raise self.fail(rule, f"value {digits} out of range")
        return int(significant, base), len(digits)


def _timestamp(cur: _Cursor) -> Timestamp:
    cur.tag("(", "timestamp")
    seconds, _ = cur.number(_DIGITS, "seconds", 10, U64_MAX)
    cur.tag(".", "timestamp")
    nanos, _ = cur.number(_DIGITS, "nanos", 10, U64_MAX)
    cur.tag(")", "timestamp")
    return Timestamp(seconds=seconds, nanos=nanos)


def _entry(cur: _Cursor) -> LogEntry:
    timestamp = _timestamp(cur)
    cur.skip_spaces()
    interface = cur.take(_ALNUM, "interface")
    cur.skip_spaces()
    frame_id, id_digits = cur.number(_HEX, "frame_id", 16, U32_MAX)
    cur.tag("#", "frame")
    frame_body, body_digits = cur.number(_HEX, "frame_body", 16, U64_MAX)

    return LogEntry(
        timestamp=timestamp,
        interface=interface,
        frame_id=frame_id,
        frame_body=frame_body,
        body_digits=body_digits,
        id_digits=id_digits,
    )


def parse_prefix(text: str) -> tuple[LogEntry, str]:
    """
    Parse one entry from the start of ``text``.

    Returns:
        (entry, remaining) where remaining is whatever follows the frame

    Raises:
        ParseError: At the first rule that fails to match
    """
    cur = _Cursor(text)
    entry = _entry(cur)
    return entry, text[cur.pos:]


def parse_line(line: str) -> LogEntry:
    """
    Parse a complete candump log line.

    A trailing line terminator is allowed; anything else after the
    frame body is rejected.

    Args:
        line: One line of a candump log

    Returns:
        Parsed log entry

    Raises:
        ParseError: If the line does not match the grammar
    """
    text = line.rstrip("\r\n")
    cur = _Cursor(text)
    entry = _entry(cur)
    if cur.pos != len(text):
        raise cur.fail("end", "unexpected trailing input")
    return entry


def iter_log(lines: Iterable[str], skip_invalid: bool = False) -> Iterator[LogEntry]:
    """
    Stream entries from log lines.

    Blank lines are ignored. Malformed lines either raise (default) or are
    logged and skipped.

    Yields:
        LogEntry for each valid line
    """
    entry_count = 0
    error_count = 0

    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            entry = parse_line(line)
        except ParseError as e:
            if not skip_invalid:
                logger.error(f"Line {line_no}: {e}")
                raise
            error_count += 1
            logger.debug(f"Skipping line {line_no}: {e}")
            continue

        entry_count += 1
        yield entry

    logger.info(f"Parsed {entry_count} entries, skipped {error_count} lines")


def format_line(
    timestamp: float,
    interface: str,
    frame_id: int,
    data: bytes,
    is_extended: bool = False,
) -> str:
    """
    Write a frame in candump log format.

    The id is printed with 3 hex digits for standard frames and 8 for
    extended ones; the timestamp carries microseconds.
    """
    total_us = round(timestamp * 1_000_000)
    seconds, micros = divmod(total_us, 1_000_000)
    frame_hex = f"{frame_id:08X}" if is_extended else f"{frame_id:03X}"
    body_hex = bytes(data).hex().upper()
    return f"({seconds:010d}.{micros:06d}) {interface} {frame_hex}#{body_hex}"
