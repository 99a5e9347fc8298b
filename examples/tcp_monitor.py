# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
examples/tcp_monitor.py

Real-time monitor for UKHASnet packets streamed over TCP.

This example demonstrates:
- Connecting to a TCP sample source
- Registering callbacks for packets and diagnostics
- Printing ASCII payloads with node statistics
- Reconnecting after a dropped connection
- Graceful shutdown on interrupt

Start the sample server first, e.g.:
    rtl_fm -f 433961890 -s 64k -g 0 -p 162 | nc -l 7355

Then run:
    python examples/tcp_monitor.py
"""

import logging
import time
from collections import Counter

from pyukhasnet import Decoder, DecoderConfig, TCPSampleSource, TransportError
from pyukhasnet.utils import configure_logging, format_timestamp

configure_logging("INFO")
logger = logging.getLogger("tcp_monitor")

# Default configuration - modify for your setup
HOST = "localhost"
PORT = 7355
SAMPLE_RATE = 64000
RECONNECT_DELAY = 5.0


def node_name(payload: bytes) -> str:
    """Originating node: first name inside the [path] suffix"""
    text = payload.decode("ascii", errors="replace")
    if "[" not in text:
        return "?"
    return text[text.index("[") + 1:].rstrip("]").split(",")[0]


def main() -> None:
    """Main monitoring loop."""
    print("PyUKHASnet TCP Monitor")
    print(f"Connecting to {HOST}:{PORT}, sample rate {SAMPLE_RATE} Hz")
    print("Press Ctrl+C to stop\n")

    decoder = Decoder(DecoderConfig(sample_rate=SAMPLE_RATE, verbose=True))
    heard = Counter()

    def on_packet(packet) -> None:
        node = node_name(packet.payload)
        heard[node] += 1
        text = packet.payload.decode("ascii", errors="replace")
        print(f"{format_timestamp(packet.timestamp)} [{node} x{heard[node]}] {text}")

    def on_diagnostic(diagnostic) -> None:
        logger.debug(diagnostic.message)

    decoder.register_packet_callback(on_packet)
    decoder.register_diagnostic_callback(on_diagnostic)

    try:
        while True:
            try:
                with TCPSampleSource(HOST, PORT) as source:
                    decoder.run(source)
                logger.info("Sample server closed the connection")
            except TransportError as e:
                logger.error(f"Connection failed: {e}")
            # The next connection is a new stream, unrelated to the last one
            decoder.reset()
            time.sleep(RECONNECT_DELAY)
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        stats = decoder.stats
        print(f"{stats.packets} packets, {stats.checksum_errors} CRC errors, "
              f"{stats.syncs} syncs")
        print("Monitor stopped.")


if __name__ == "__main__":
    main()
