import unittest
import sys
from pathlib import Path

# Add src to path to allow imports
sys.path.append(str(Path(__file__).parent.parent / "src"))

from candump_rainbow.core.models import RawFrame
from candump_rainbow.core.stats import BusStatistics


class TestBusStatistics(unittest.TestCase):
    def setUp(self):
        self.stats = BusStatistics()
        self.stats.update(RawFrame(identifier=0x200, is_extended=False, payload=bytes(8)))
        self.stats.update(RawFrame(identifier=0x100, is_extended=False, payload=b"", is_remote_frame=True))
        self.stats.update(RawFrame(identifier=0x200, is_extended=False, payload=bytes(8)))
        self.stats.update(RawFrame(identifier=0x18FEF100, is_extended=True, payload=bytes(8)))
        self.stats.update(
            RawFrame(identifier=0x18FEF100, is_extended=True, payload=b"", is_error_frame=True)
        )

    def test_counts(self):
        self.assertEqual(self.stats.rx_frames, 5)
        self.assertEqual(self.stats.sff.total, 3)
        self.assertEqual(self.stats.sff.remote, 1)
        self.assertEqual(self.stats.sff.errors, 0)
        self.assertEqual(self.stats.eff.total, 2)
        self.assertEqual(self.stats.eff.errors, 1)
        self.assertEqual(self.stats.msg_ids[0x200], 2)

    def test_report(self):
        lines = self.stats.report().splitlines()
        self.assertEqual(lines[0], "RX Total: 5")
        self.assertEqual(lines[1], "EFF Total: 2\tERR: 1\tRTR: 0")
        self.assertEqual(lines[2], "SFF Total: 3\tERR: 0\tRTR: 1")
        self.assertEqual(lines[3], "Messages by CAN ID")
        ids = [int(line.split("→")[0]) for line in lines[4:]]
        self.assertEqual(ids, [0x100, 0x200, 0x18FEF100])

    def test_reset(self):
        self.stats.reset()
        self.assertEqual(self.stats.rx_frames, 0)
        self.assertEqual(self.stats.eff.total, 0)
        self.assertEqual(len(self.stats.msg_ids), 0)


if __name__ == "__main__":
    unittest.main()
