"""
DBC-based CAN signal decoder.

Extracts each signal's bit field from an 8-byte payload and applies
affine scaling. Scaling is done in 32-bit float (numpy.float32), so the
last displayed digit matches other f32 decoders rather than float64 ones.
Includes standalone functions so decoding can run without a catalog.
"""

from typing import Iterable

import numpy as np

from ..utils.logging_config import get_logger
from .catalog import SignalCatalog, validate_signal
from .errors import ShortFrame
from .models import (
    ByteOrder,
    DecodedSignal,
    MessageDescriptor,
    RawFrame,
    SignalDescriptor,
)

logger = get_logger("decoder")

# Classic CAN payload size; shorter frames are rejected, never padded
FRAME_LENGTH = 8

# Significand width of float32, including the implicit bit
FLOAT32_MANTISSA_BITS = 24


def _payload_bytes(payload: bytes | Iterable[int]) -> bytes:
    data = bytes(payload)
    if len(data) != FRAME_LENGTH:
        raise ShortFrame(len(data), FRAME_LENGTH)
    return data


def extract_raw(signal: SignalDescriptor, payload_int: int) -> int:
    """
    Isolate a signal's bit field from the payload integer.

    Args:
        signal: Signal to extract
        payload_int: Payload read as a 64-bit unsigned integer in the
                     signal's byte order

    Returns:
        Raw integer value, sign-extended when the signal is signed
    """
    raw = (payload_int >> signal.start_bit) & signal.mask
    if signal.is_signed and raw >> (signal.length - 1):
        raw -= 1 << signal.length
    return raw


def int_to_float32(raw: int) -> np.float32:
    """
    Round an integer to the nearest float32 (ties to even) in one step.

    ``np.float32(int)`` goes through float64 first, which rounds twice for
    values wider than 53 bits.
    """
    magnitude = abs(raw)
    excess = magnitude.bit_length() - FLOAT32_MANTISSA_BITS
    if excess > 0:
        kept = magnitude >> excess
        dropped = magnitude & ((1 << excess) - 1)
        half = 1 << (excess - 1)
        if dropped > half or (dropped == half and kept & 1):
            kept += 1
        magnitude = kept << excess
    # At most 24 significant bits remain, so both casts below are exact
    return np.float32(float(-magnitude if raw < 0 else magnitude))


def scale(raw: int, factor: float, offset: float) -> float:
    """Apply ``raw * factor + offset`` in 32-bit float."""
    value = int_to_float32(raw) * np.float32(factor) + np.float32(offset)
    return float(value)


def decode_signals(
    message: MessageDescriptor,
    payload: bytes | Iterable[int],
) -> list[DecodedSignal]:
    """
    Decode every signal of a message, in catalog order.

    Args:
        message: Message descriptor from the catalog
        payload: Exactly 8 payload bytes

    Returns:
        List of decoded signals with raw and physical values

    Raises:
        ShortFrame: If the payload is not exactly 8 bytes
        InvalidCatalog: If a signal does not fit in 64 bits
    """
    data = _payload_bytes(payload)

    # Payload integer per byte order
    as_int: dict[ByteOrder, int] = {}

    decoded = []
    for sig in message.signals:
        validate_signal(sig, message.name)

        payload_int = as_int.get(sig.byte_order)
        if payload_int is None:
            payload_int = int.from_bytes(data, sig.byte_order.byteorder)
            as_int[sig.byte_order] = payload_int

        raw = extract_raw(sig, payload_int)
        decoded.append(
            DecodedSignal(
                signal_name=sig.name,
                physical_value=scale(raw, sig.factor, sig.offset),
                raw_value=raw,
                unit=sig.unit,
            )
        )

    return decoded


def decode_payload(
    message: MessageDescriptor,
    payload: bytes | Iterable[int],
) -> list[tuple[str, float]]:
    """
    Decode a payload into ordered (signal_name, physical_value) pairs.

    Raises:
        ShortFrame: If the payload is not exactly 8 bytes
        InvalidCatalog: If a signal does not fit in 64 bits
    """
    return [sig.as_pair() for sig in decode_signals(message, payload)]


class SignalDecoder:
    """
    Decodes raw CAN frames using a signal catalog.

    Holds no state besides the catalog reference, so a single instance
    can be shared between threads. ``reload`` swaps the whole catalog.
    """

    def __init__(self, catalog: SignalCatalog):
        self._catalog = catalog

    @property
    def catalog(self) -> SignalCatalog:
        return self._catalog

    def reload(self, catalog: SignalCatalog) -> None:
        """Replace the catalog; readers see either the old or the new one."""
        logger.info(
            f"Swapping catalog: {len(self._catalog)} -> {len(catalog)} messages"
        )
        self._catalog = catalog

    def decode(
        self,
        message_id: int,
        payload: bytes | Iterable[int],
    ) -> list[tuple[str, float]]:
        """
        Look up a message and decode its payload.

        Raises:
            UnknownMessage: If the id is not in the catalog
            ShortFrame: If the payload is not exactly 8 bytes
        """
        message = self._catalog.lookup(message_id)
        return decode_payload(message, payload)

    def decode_frame(self, frame: RawFrame) -> tuple[MessageDescriptor, list[DecodedSignal]]:
        """
        Decode a raw frame into its message descriptor and signal values.

        Raises:
            UnknownMessage: If the frame id is not in the catalog
            ShortFrame: If the payload is not exactly 8 bytes
        """
        message = self._catalog.lookup(frame.identifier)
        try:
            return message, decode_signals(message, frame.payload)
        except ShortFrame:
            logger.debug(
                f"Short frame for 0x{frame.identifier:03X}: {len(frame.payload)} bytes"
            )
            raise
