"""
Running statistics for received CAN frames.
"""

from collections import Counter
from dataclasses import dataclass, field

from .models import RawFrame


@dataclass(slots=True)
class FrameKindStats:
    """Counters for one frame format (standard or extended)."""

    total: int = 0
    errors: int = 0
    remote: int = 0


@dataclass(slots=True)
class BusStatistics:
    """
    Mutable counters updated once per received frame.

    Owned by a single reader loop; not shared between threads.
    """

    rx_frames: int = 0
    eff: FrameKindStats = field(default_factory=FrameKindStats)
    sff: FrameKindStats = field(default_factory=FrameKindStats)
    msg_ids: Counter = field(default_factory=Counter)

    def update(self, frame: RawFrame) -> None:
        """Count one frame."""
        self.rx_frames += 1

        kind = self.eff if frame.is_extended else self.sff
        kind.total += 1
        if frame.is_error_frame:
            kind.errors += 1
        if frame.is_remote_frame:
            kind.remote += 1

        self.msg_ids[frame.identifier] += 1

    def reset(self) -> None:
        """Reset all counters."""
        self.rx_frames = 0
        self.eff = FrameKindStats()
        self.sff = FrameKindStats()
        self.msg_ids.clear()

    def report(self) -> str:
        """Return a multi-line text report, ids sorted ascending."""
        lines = [
            f"RX Total: {self.rx_frames}",
            f"EFF Total: {self.eff.total}\tERR: {self.eff.errors}\tRTR: {self.eff.remote}",
            f"SFF Total: {self.sff.total}\tERR: {self.sff.errors}\tRTR: {self.sff.remote}",
            "Messages by CAN ID",
        ]
        for msg_id, count in sorted(self.msg_ids.items()):
            lines.append(f"{msg_id:^10} → #{count:^7}")
        return "\n".join(lines) + "\n"
