"""Exceptions raised by the catalog, decoder and log parser."""

from typing import Optional


class CANDumpError(Exception):
    """Base class for all decoding and parsing failures."""
    pass


class InvalidCatalog(CANDumpError):
    """Raised when signal geometry is invalid or message ids collide."""
    pass


class UnknownMessage(CANDumpError):
    """Raised when a message id is absent from the catalog."""

    def __init__(self, message_id: int):
        self.message_id = message_id
        super().__init__(f"Unknown message id 0x{message_id:X}")


class ShortFrame(CANDumpError):
    """Raised when a payload is not exactly 8 bytes long."""

    def __init__(self, length: int, expected: int = 8):
        self.length = length
        self.expected = expected
        super().__init__(
            f"Payload is {length} bytes, expected exactly {expected}"
        )


class ParseError(CANDumpError):
    """
    Raised when a log line does not match the candump grammar.

    Attributes:
        line: The full input that was being parsed
        rule: Name of the grammar rule that failed
        offset: Character offset where the rule failed
        remaining: Unconsumed input starting at ``offset``
    """

    def __init__(self, line: str, rule: str, offset: int, reason: Optional[str] = None):
        self.line = line
        self.rule = rule
        self.offset = offset
        self.remaining = line[offset:]
        message = f"Failed to parse {rule} at offset {offset}: {self.remaining!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
