#!/usr/bin/env python3
"""
Script to generate a sample candump log matching sample.dbc.

Usage:
    python generate_sample_log.py [output_file] [message_count]

Examples:
    python generate_sample_log.py                      # Creates sample.log (10,000 frames)
    python generate_sample_log.py my_test.log 500      # Creates my_test.log (500 frames)

Then replay it:
    candump-rainbow replay sample.log -i sample.dbc
"""

import os
import random
import sys
import time

from candump_rainbow.core.parser import format_line

# (id, is_extended) pairs defined in sample.dbc
CAN_IDS = [
    (0x100, False),  # Engine ECU
    (0x200, False),  # Transmission ECU
    (0x400, False),  # Steering ECU
    (0x18FEF100, True),  # J1939 Engine Temperature
]

INTERFACES = ["vcan0", "vcan1"]


def generate_payload(can_id: int, timestamp: float) -> bytes:
    """
    Generate somewhat realistic data patterns based on CAN ID.
    This creates more interesting values with trends and patterns.
    """
    if can_id == 0x100:  # Engine RPM / throttle / coolant
        rpm = max(800, min(6500, 800 + int(2000 * (1 + (timestamp % 60) / 30))))
        rpm += random.randint(-50, 50)
        throttle = random.randint(0, 200)  # 0.5 % per bit
        coolant = 85 + 40 + random.randint(-5, 15)  # offset -40
        return bytes([rpm & 0xFF, (rpm >> 8) & 0xFF, throttle, coolant, 0, 0, 0, 0])

    if can_id == 0x200:  # Vehicle speed simulation, 0-120 km/h cycle
        speed = int(60 + 60 * abs((timestamp % 120) / 60 - 1)) * 100
        gear = min(6, max(1, speed // 2000))
        return bytes([speed & 0xFF, (speed >> 8) & 0xFF, 0, gear, 0, 0, 0, 0])

    if can_id == 0x400:  # Steering angle oscillating, signed 0.1 deg
        angle = int(900 * ((timestamp % 10) / 5 - 1)) & 0xFFFF
        return bytes([angle & 0xFF, (angle >> 8) & 0xFF, 0, 0, 0, 0, 0, 0])

    # J1939 or other extended IDs - more random data
    return bytes(random.randint(0, 255) for _ in range(8))


def generate_log_file(
    output_path: str,
    message_count: int = 10_000,
    time_step_ms: float = 10.0,
) -> None:
    """
    Generate a candump log file.

    Args:
        output_path: Path to output log file
        message_count: Number of frames to write
        time_step_ms: Time step between frames in milliseconds
    """
    timestamp = time.time()

    print(f"Generating candump log: {output_path}")

    with open(output_path, "w") as f:
        for _ in range(message_count):
            can_id, is_extended = random.choice(CAN_IDS)
            interface = random.choice(INTERFACES)
            payload = generate_payload(can_id, timestamp)

            f.write(format_line(timestamp, interface, can_id, payload, is_extended) + "\n")
            timestamp += time_step_ms / 1000.0

    final_size = os.path.getsize(output_path)
    print(f"Wrote {message_count:,} frames ({final_size:,} bytes)")


def main():
    """Main entry point."""
    output_file = "sample.log"
    message_count = 10_000

    if len(sys.argv) >= 2:
        output_file = sys.argv[1]

    if len(sys.argv) >= 3:
        try:
            message_count = int(sys.argv[2])
        except ValueError:
            print(f"Invalid count '{sys.argv[2]}'. Using default 10,000.")

    # Ensure output is in the samples directory if no path specified
    if not os.path.dirname(output_file):
        script_dir = os.path.dirname(os.path.abspath(__file__))
        output_file = os.path.join(script_dir, output_file)

    generate_log_file(output_file, message_count)


if __name__ == "__main__":
    main()
