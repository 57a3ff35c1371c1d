"""
DBC signal catalog.

Builds a read-only index from message identifier to message descriptor.
The DBC grammar itself is handled by cantools; this module only consumes
the parsed database.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Optional

import cantools

from ..utils.logging_config import get_logger
from .errors import InvalidCatalog, UnknownMessage
from .models import ByteOrder, MessageDescriptor, SignalDescriptor

logger = get_logger("catalog")

# Extended Frame Format flag, as set by SocketCAN and DBC files
CAN_EFF_FLAG = 0x80000000
MAX_PAYLOAD_BITS = 64


def normalize_id(message_id: int) -> int:
    """Strip the extended-frame flag so standard and extended ids share keys."""
    return message_id & ~CAN_EFF_FLAG & 0xFFFFFFFF


def validate_signal(signal: SignalDescriptor, message_name: str = "") -> None:
    """
    Check that a signal fits inside a 64-bit payload.

    Raises:
        InvalidCatalog: If the start bit or length is out of range
    """
    where = f"{message_name}.{signal.name}" if message_name else signal.name
    if signal.start_bit < 0:
        raise InvalidCatalog(f"Signal {where} has negative start bit {signal.start_bit}")
    if signal.length < 1:
        raise InvalidCatalog(f"Signal {where} has non-positive length {signal.length}")
    if signal.end_bit > MAX_PAYLOAD_BITS:
        raise InvalidCatalog(
            f"Signal {where} spans bits {signal.start_bit}..{signal.end_bit - 1}, "
            f"past the {MAX_PAYLOAD_BITS}-bit payload"
        )


def signal_from_dbc(sig: Any) -> SignalDescriptor:
    """Convert a cantools signal into a descriptor."""
    if sig.byte_order == "big_endian":
        byte_order = ByteOrder.BIG_ENDIAN
    else:
        byte_order = ByteOrder.LITTLE_ENDIAN

    return SignalDescriptor(
        name=sig.name,
        start_bit=sig.start,
        length=sig.length,
        byte_order=byte_order,
        factor=float(sig.scale),
        offset=float(sig.offset),
        is_signed=bool(getattr(sig, "is_signed", False)),
        unit=getattr(sig, "unit", None) or "",
    )


class SignalCatalog:
    """
    Immutable mapping from stripped message id to message descriptor.

    Built once, then safe to share between any number of readers.
    To reload, build a new catalog and swap the reference.
    """

    def __init__(self, messages: Iterable[MessageDescriptor]):
        index: dict[int, MessageDescriptor] = {}

        for msg in messages:
            key = normalize_id(msg.message_id)
            if key in index:
                raise InvalidCatalog(
                    f"Message {msg.name!r} id 0x{key:X} collides with "
                    f"{index[key].name!r}"
                )

            seen: set[str] = set()
            for sig in msg.signals:
                validate_signal(sig, msg.name)
                if sig.name in seen:
                    raise InvalidCatalog(
                        f"Signal {sig.name!r} defined twice in {msg.name!r}"
                    )
                seen.add(sig.name)

            if key != msg.message_id or not isinstance(msg.signals, tuple):
                msg = MessageDescriptor(
                    message_id=key,
                    name=msg.name,
                    signals=tuple(msg.signals),
                    is_extended=msg.is_extended,
                )
            index[key] = msg

        self._index = MappingProxyType(index)

    @classmethod
    def from_messages(cls, messages: Iterable[MessageDescriptor]) -> "SignalCatalog":
        """Build a catalog from descriptors."""
        return cls(messages)

    @classmethod
    def from_database(cls, db: Any) -> "SignalCatalog":
        """
        Build a catalog from an already parsed cantools database.

        Args:
            db: cantools ``Database`` (or anything exposing ``messages``
                with cantools' attribute names)

        Returns:
            New catalog

        Raises:
            InvalidCatalog: On id collisions or invalid signal geometry
        """
        messages = []
        for msg in db.messages:
            messages.append(
                MessageDescriptor(
                    message_id=msg.frame_id,
                    name=msg.name,
                    signals=tuple(signal_from_dbc(sig) for sig in msg.signals),
                    is_extended=bool(getattr(msg, "is_extended_frame", False)),
                )
            )

        catalog = cls(messages)
        logger.info(
            f"Built catalog with {len(catalog)} messages, "
            f"{sum(len(m.signals) for m in catalog.messages)} signals"
        )
        return catalog

    @classmethod
    def load_file(cls, dbc_path: Path | str) -> "SignalCatalog":
        """
        Load and parse a DBC file, then build the catalog.

        Raises:
            FileNotFoundError: If DBC file doesn't exist
            InvalidCatalog: On id collisions or invalid signal geometry
        """
        dbc_path = Path(dbc_path)

        if not dbc_path.exists():
            raise FileNotFoundError(f"DBC file not found: {dbc_path}")

        logger.info(f"Loading DBC: {dbc_path.name}")
        db = cantools.database.load_file(str(dbc_path))
        return cls.from_database(db)

    def lookup(self, message_id: int) -> MessageDescriptor:
        """
        Get message descriptor by id.

        Raises:
            UnknownMessage: If the id is not in the catalog
        """
        key = normalize_id(message_id)
        try:
            return self._index[key]
        except KeyError:
            raise UnknownMessage(key) from None

    def get(self, message_id: int) -> Optional[MessageDescriptor]:
        """Get message descriptor by id, or None if unknown."""
        return self._index.get(normalize_id(message_id))

    @property
    def message_ids(self) -> list[int]:
        return list(self._index)

    @property
    def messages(self) -> list[MessageDescriptor]:
        return list(self._index.values())

    def __contains__(self, message_id: object) -> bool:
        return isinstance(message_id, int) and normalize_id(message_id) in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[MessageDescriptor]:
        return iter(self._index.values())
