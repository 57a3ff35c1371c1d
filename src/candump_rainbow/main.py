"""
candump-rainbow - Entry Point

Colorful CAN dump tool with DBC signal decoding, candump log replay,
and live bus statistics.
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import can
from rich.console import Console

from .core.catalog import SignalCatalog
from .core.decoder import SignalDecoder
from .core.errors import CANDumpError, ShortFrame, UnknownMessage
from .core.models import RawFrame
from .core.parser import format_line, iter_log
from .core.render import render_frame, render_signals
from .core.stats import BusStatistics
from .utils.logging_config import get_logger, setup_logging

logger = get_logger("main")

DEFAULT_BUSTYPE = "socketcan"
RECV_TIMEOUT = 1.0  # seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="candump-rainbow",
        description="Candump Rainbow. A colorful can dump tool with dbc support.",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Increase console log level (-v info, -vv debug)",
    )
    parser.add_argument(
        "--log-dir", type=Path, default=None,
        help="Directory for log files (default ~/.candump_rainbow/logs)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    dump = sub.add_parser("dump", help="Dump frames from a live CAN interface")
    dump.add_argument("channel", help="CAN interface e.g. vcan0")
    dump.add_argument(
        "-i", "--input", type=Path, default=None,
        help="DBC file path, if not passed frame signals are not decoded",
    )
    dump.add_argument("--bustype", default=DEFAULT_BUSTYPE, help="python-can interface")
    dump.add_argument(
        "--skip-unknown", action="store_true",
        help="Skip frames whose id is not in the DBC instead of aborting",
    )
    dump.add_argument(
        "--log", action="store_true",
        help="Print frames in candump log format instead of colored hex",
    )

    replay = sub.add_parser("replay", help="Decode a candump log file")
    replay.add_argument("logfile", type=Path, help="candump log file")
    replay.add_argument(
        "-i", "--input", type=Path, default=None,
        help="DBC file path, if not passed frame signals are not decoded",
    )
    replay.add_argument(
        "--skip-invalid", action="store_true",
        help="Skip malformed log lines instead of aborting",
    )
    replay.add_argument(
        "--skip-unknown", action="store_true",
        help="Skip frames whose id is not in the DBC instead of aborting",
    )

    stats = sub.add_parser("stats", help="SocketCAN message statistics")
    stats.add_argument("channel", help="CAN interface e.g. vcan0")
    stats.add_argument("--bustype", default=DEFAULT_BUSTYPE, help="python-can interface")
    stats.add_argument(
        "--interval", type=float, default=1.0,
        help="Seconds between report refreshes",
    )

    return parser


def load_decoder(dbc_path: Optional[Path]) -> Optional[SignalDecoder]:
    """Build a decoder from a DBC file, or None when no file was given."""
    if dbc_path is None:
        return None
    return SignalDecoder(SignalCatalog.load_file(dbc_path))


def print_signals(
    console: Console,
    decoder: SignalDecoder,
    frame: RawFrame,
    skip_unknown: bool,
) -> None:
    """
    Decode a frame and print its signals.

    Unknown ids abort unless ``skip_unknown`` is set; frames that are not
    8 bytes long are printed undecoded.
    """
    try:
        message, signals = decoder.decode_frame(frame)
    except UnknownMessage as e:
        if not skip_unknown:
            raise
        logger.debug(f"Skipping frame: {e}")
        return
    except ShortFrame as e:
        logger.debug(f"Not decoding 0x{frame.identifier:03X}: {e}")
        return

    console.print(render_signals(message, signals))


def run_dump(args: argparse.Namespace, console: Console) -> int:
    decoder = load_decoder(args.input)

    with can.Bus(channel=args.channel, interface=args.bustype) as bus:
        logger.info(f"Listening on {args.channel} ({args.bustype})")
        while True:
            try:
                msg = bus.recv(timeout=RECV_TIMEOUT)
            except can.CanError as e:
                logger.error(f"IO error: {e}")
                continue
            if msg is None:
                continue

            frame = RawFrame.from_can_message(msg)

            if args.log:
                console.print(
                    format_line(
                        frame.timestamp, args.channel, frame.identifier,
                        frame.payload, frame.is_extended,
                    ),
                    markup=False,
                )
                continue

            if decoder is not None:
                print_signals(console, decoder, frame, args.skip_unknown)
            console.print(render_frame(frame))


def run_replay(args: argparse.Namespace, console: Console) -> int:
    decoder = load_decoder(args.input)

    if not args.logfile.exists():
        raise FileNotFoundError(f"Log file not found: {args.logfile}")

    logger.info(f"Replaying: {args.logfile.name}")

    with open(args.logfile, "r", encoding="utf-8") as f:
        for entry in iter_log(f, skip_invalid=args.skip_invalid):
            frame = RawFrame(
                identifier=entry.frame_id,
                is_extended=entry.is_extended,
                payload=entry.payload,
            )
            if decoder is not None:
                print_signals(console, decoder, frame, args.skip_unknown)

            line = render_frame(frame)
            line.append(f" {entry.interface}", style="dim")
            console.print(line)

    return 0


def run_stats(args: argparse.Namespace, console: Console) -> int:
    stats = BusStatistics()
    last_report = 0.0

    with can.Bus(channel=args.channel, interface=args.bustype) as bus:
        logger.info(f"Collecting statistics on {args.channel}")
        while True:
            try:
                msg = bus.recv(timeout=RECV_TIMEOUT)
            except can.CanError as e:
                logger.error(f"IO error: {e}")
                continue
            if msg is None:
                continue

            stats.update(RawFrame.from_can_message(msg))

            now = time.monotonic()
            if now - last_report >= args.interval:
                console.print(stats.report(), markup=False)
                last_report = now


COMMANDS = {
    "dump": run_dump,
    "replay": run_replay,
    "stats": run_stats,
}


def main(argv: Optional[list[str]] = None) -> int:
    """
    Application entry point.

    Returns:
        Exit code (0 for success)
    """
    args = build_parser().parse_args(argv)

    console_level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    app_logger = setup_logging(log_dir=args.log_dir, console_level=console_level)
    app_logger.info(f"Starting candump-rainbow {args.command}")

    console = Console(highlight=False)

    try:
        return COMMANDS[args.command](args, console)
    except KeyboardInterrupt:
        app_logger.info("Interrupted")
        return 130
    except (CANDumpError, OSError, can.CanError) as e:
        app_logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
