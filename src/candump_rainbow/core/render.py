"""
Terminal rendering of frames and decoded signals.

Byte colors come from a 256-entry table built once at import and never
modified afterwards.
"""

from enum import Enum
from typing import Iterable

from rich.text import Text

from .models import DecodedSignal, MessageDescriptor, RawFrame


class ByteCategory(Enum):
    """Byte classification used for coloring."""

    NULL = "null"
    ASCII_PRINTABLE = "ascii_printable"
    ASCII_WHITESPACE = "ascii_whitespace"
    ASCII_OTHER = "ascii_other"
    NON_ASCII = "non_ascii"


CATEGORY_STYLES = {
    ByteCategory.NULL: "color(242)",  # grey
    ByteCategory.ASCII_PRINTABLE: "cyan",
    ByteCategory.ASCII_WHITESPACE: "green",
    ByteCategory.ASCII_OTHER: "magenta",
    ByteCategory.NON_ASCII: "yellow",
}

STYLE_CAN_ID = "white"
STYLE_CAN_SFF = "blue"
STYLE_CAN_EFF = "red"
STYLE_MESSAGE = "magenta"
STYLE_SIGNAL = "green"
STYLE_VALUE = "cyan"

# space, \t, \n, \f, \r
_ASCII_WHITESPACE = frozenset(b" \t\n\x0c\r")


def categorize(byte: int) -> ByteCategory:
    """Classify a byte value (0-255)."""
    if byte == 0x00:
        return ByteCategory.NULL
    if 0x21 <= byte <= 0x7E:
        return ByteCategory.ASCII_PRINTABLE
    if byte in _ASCII_WHITESPACE:
        return ByteCategory.ASCII_WHITESPACE
    if byte < 0x80:
        return ByteCategory.ASCII_OTHER
    return ByteCategory.NON_ASCII


# Style for every byte value
BYTE_STYLES: tuple[str, ...] = tuple(CATEGORY_STYLES[categorize(i)] for i in range(256))

# (hex text, style) for every byte value
BYTE_HEX_TABLE: tuple[tuple[str, str], ...] = tuple(
    (f"{i:02x} ", style) for i, style in enumerate(BYTE_STYLES)
)


def render_frame(frame: RawFrame) -> Text:
    """
    Render a frame as ``EFF|SFF <id> <bytes>`` with colored bytes.

    Args:
        frame: Frame to render

    Returns:
        rich Text ready for a Console
    """
    text = Text()
    if frame.is_extended:
        text.append("EFF ", style=STYLE_CAN_EFF)
    else:
        text.append("SFF ", style=STYLE_CAN_SFF)

    text.append(f"{frame.identifier:08x} ", style=STYLE_CAN_ID)

    for b in frame.payload:
        hex_text, style = BYTE_HEX_TABLE[b]
        text.append(hex_text, style=style)

    return text


def render_signals(message: MessageDescriptor, signals: Iterable[DecodedSignal]) -> Text:
    """Render a message name followed by one ``name → value`` line per signal."""
    text = Text("\n")
    text.append(message.name, style=STYLE_MESSAGE)

    for sig in signals:
        text.append("\n")
        text.append(sig.signal_name, style=STYLE_SIGNAL)
        text.append(" → value ")
        text.append(f"{sig.physical_value:6.4f}", style=STYLE_VALUE)
        if sig.unit:
            text.append(f" {sig.unit}")

    return text
