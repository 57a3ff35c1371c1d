import unittest
import sys
from pathlib import Path

# Add src to path to allow imports
sys.path.append(str(Path(__file__).parent.parent / "src"))

from candump_rainbow.core.errors import ParseError
from candump_rainbow.core.models import LogEntry, Timestamp
from candump_rainbow.core.parser import format_line, iter_log, parse_line, parse_prefix


class TestParseLine(unittest.TestCase):
    def test_reference_line(self):
        entry = parse_line("(1547046014.597158) vcan0 7B#1C7")
        self.assertEqual(
            entry,
            LogEntry(
                timestamp=Timestamp(seconds=1547046014, nanos=597158),
                interface="vcan0",
                frame_id=123,
                frame_body=455,
                body_digits=3,
                id_digits=2,
            ),
        )

    def test_payload_keeps_leading_zeros(self):
        entry = parse_line("(1.5) can0 100#00000000000001FF")
        self.assertEqual(entry.frame_body, 0x1FF)
        self.assertEqual(entry.payload, bytes([0, 0, 0, 0, 0, 0, 0x01, 0xFF]))
        self.assertEqual(parse_line("(1.5) can0 7B#1C7").payload, bytes([0x01, 0xC7]))

    def test_body_width_changes_magnitude(self):
        short = parse_line("(1.5) can0 7B#0102")
        long = parse_line("(1.5) can0 7B#0102000000000000")
        self.assertNotEqual(short.frame_body, long.frame_body)

    def test_lowercase_hex(self):
        entry = parse_line("(1.5) can0 18fef100#deadbeef")
        self.assertEqual(entry.frame_id, 0x18FEF100)
        self.assertEqual(entry.frame_body, 0xDEADBEEF)

    def test_spaces_are_optional(self):
        entry = parse_line("(1.2)vcan0 7B#1C7")
        self.assertEqual(entry.interface, "vcan0")

    def test_multiple_spaces(self):
        entry = parse_line("(1.2)   vcan0    7B#1C7")
        self.assertEqual(entry.interface, "vcan0")
        self.assertEqual(entry.frame_id, 0x7B)

    def test_tabs_are_whitespace(self):
        entry = parse_line("(1547046014.597158)\tvcan0\t7B#1C7")
        self.assertEqual(entry.interface, "vcan0")
        self.assertEqual(entry.frame_id, 0x7B)
        self.assertEqual(entry.frame_body, 0x1C7)

    def test_extended_from_id_width(self):
        entry = parse_line("(1.5) can0 00000123#00")
        self.assertEqual(entry.frame_id, 0x123)
        self.assertEqual(entry.id_digits, 8)
        self.assertTrue(entry.is_extended)

        entry = parse_line("(1.5) can0 7B#00")
        self.assertEqual(entry.id_digits, 2)
        self.assertFalse(entry.is_extended)

        self.assertFalse(parse_line("(1.5) can0 07B#00").is_extended)
        self.assertTrue(parse_line("(1.5) can0 18FEF100#00").is_extended)

    def test_nanos_not_padded(self):
        entry = parse_line("(1.0000000001234) can0 1#2")
        self.assertEqual(entry.timestamp, Timestamp(seconds=1, nanos=1234))

        entry = parse_line("(1.12345678901) can0 1#2")
        self.assertEqual(entry.timestamp.nanos, 12345678901)

    def test_line_terminators(self):
        self.assertEqual(parse_line("(1.2) can0 7B#1C7\n").frame_body, 0x1C7)
        self.assertEqual(parse_line("(1.2) can0 7B#1C7\r\n").frame_body, 0x1C7)

    def test_u32_frame_id_bounds(self):
        self.assertEqual(parse_line("(1.2) can0 FFFFFFFF#00").frame_id, 0xFFFFFFFF)
        with self.assertRaises(ParseError) as ctx:
            parse_line("(1.2) can0 123456789#00")
        self.assertEqual(ctx.exception.rule, "frame_id")

    def test_u64_frame_body_bounds(self):
        entry = parse_line("(1.2) can0 1#FFFFFFFFFFFFFFFF")
        self.assertEqual(entry.frame_body, 2**64 - 1)
        with self.assertRaises(ParseError) as ctx:
            parse_line("(1.2) can0 1#1FFFFFFFFFFFFFFFF")
        self.assertEqual(ctx.exception.rule, "frame_body")

    def test_u64_seconds_bounds(self):
        with self.assertRaises(ParseError) as ctx:
            parse_line("(184467440737095516160.1) can0 1#2")
        self.assertEqual(ctx.exception.rule, "seconds")
        self.assertEqual(ctx.exception.offset, 1)


class TestParseErrors(unittest.TestCase):
    def test_garbage(self):
        with self.assertRaises(ParseError) as ctx:
            parse_line("garbage")
        self.assertEqual(ctx.exception.rule, "timestamp")
        self.assertEqual(ctx.exception.offset, 0)
        self.assertEqual(ctx.exception.remaining, "garbage")

    def test_empty(self):
        with self.assertRaises(ParseError):
            parse_line("")

    def test_missing_nanos(self):
        with self.assertRaises(ParseError) as ctx:
            parse_line("(1547046014) vcan0 7B#1C7")
        self.assertEqual(ctx.exception.rule, "timestamp")
        self.assertEqual(ctx.exception.remaining, ") vcan0 7B#1C7")

    def test_interface_glued_to_id(self):
        # alphanumeric+ swallows the id, leaving "#1C7" for the id rule
        with self.assertRaises(ParseError) as ctx:
            parse_line("(1.2) vcan07B#1C7")
        self.assertEqual(ctx.exception.rule, "frame_id")
        self.assertEqual(ctx.exception.remaining, "#1C7")

    def test_missing_hash(self):
        with self.assertRaises(ParseError) as ctx:
            parse_line("(1.2) can0 7B")
        self.assertEqual(ctx.exception.rule, "frame")
        self.assertEqual(ctx.exception.remaining, "")

    def test_empty_body(self):
        with self.assertRaises(ParseError) as ctx:
            parse_line("(1.2) can0 7B#")
        self.assertEqual(ctx.exception.rule, "frame_body")

    def test_remote_frame_rejected(self):
        with self.assertRaises(ParseError) as ctx:
            parse_line("(1.2) can0 7B#R")
        self.assertEqual(ctx.exception.rule, "frame_body")

    def test_trailing_garbage_rejected(self):
        with self.assertRaises(ParseError) as ctx:
            parse_line("(1.2) can0 7B#1C7 R")
        self.assertEqual(ctx.exception.rule, "end")
        self.assertEqual(ctx.exception.remaining, " R")


class TestParsePrefix(unittest.TestCase):
    def test_returns_remaining(self):
        entry, remaining = parse_prefix("(1547046014.597158) vcan0 7B#1C7 trailing")
        self.assertEqual(entry.frame_body, 0x1C7)
        self.assertEqual(remaining, " trailing")

    def test_exact(self):
        _, remaining = parse_prefix("(1547046014.597158) vcan0 7B#1C7")
        self.assertEqual(remaining, "")


class TestIterLog(unittest.TestCase):
    LINES = [
        "(1.000001) can0 100#0102030405060708\n",
        "\n",
        "not a log line\n",
        "(1.000002) can1 200#FF\n",
    ]

    def test_skip_invalid(self):
        entries = list(iter_log(self.LINES, skip_invalid=True))
        self.assertEqual([e.frame_id for e in entries], [0x100, 0x200])
        self.assertEqual([e.interface for e in entries], ["can0", "can1"])

    def test_invalid_raises(self):
        entries = iter_log(self.LINES)
        self.assertEqual(next(entries).frame_id, 0x100)
        with self.assertRaises(ParseError):
            next(entries)


class TestFormatLine(unittest.TestCase):
    def test_standard_frame(self):
        line = format_line(1547046014.597158, "vcan0", 0x7B, bytes([0x01, 0xC7]))
        self.assertEqual(line, "(1547046014.597158) vcan0 07B#01C7")

    def test_extended_frame(self):
        line = format_line(0.5, "can1", 0x18FEF100, bytes(8), is_extended=True)
        self.assertEqual(line, "(0000000000.500000) can1 18FEF100#0000000000000000")

    def test_parses_back(self):
        data = bytes([0x00, 0x11, 0x22, 0x33, 0x44, 0x55, 0x66, 0x77])
        entry = parse_line(format_line(12.25, "vcan0", 0x123, data))

        self.assertEqual(entry.timestamp, Timestamp(seconds=12, nanos=250000))
        self.assertEqual(entry.frame_id, 0x123)
        self.assertEqual(entry.payload, data)


if __name__ == "__main__":
    unittest.main()
