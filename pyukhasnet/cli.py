# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pyukhasnet/cli.py

UKHASnet decoder for rtl_fm output.

Run with:
    rtl_fm -f 433961890 -s 64k -g 0 -p 162 | ukhasnet-decoder -v -s 64000
    rtl_fm -f 433961890 -s 64k -g 0 -p 162 -r 8000 | ukhasnet-decoder -v -s 8000

Exit status: 0 on end of stream, 1 on an illegal sample rate, 2 when reading
samples or writing packets or the trace fails.
"""

import argparse
import csv
import sys
import logging
from typing import BinaryIO, List, Optional, TextIO

from .core.config import BIT_RATE, DEFAULT_SAMPLE_RATE, DecoderConfig
from .core.decoder import Decoder, DecodedPacket, Diagnostic, TraceRecord
from .core.exceptions import ConfigurationError, OutputError, TransportError
from .interfaces import create_source
from .utils import configure_logging, format_packet_line, format_timestamp

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_IO = 2

TRACE_FIELDS = ["sample_index", "sample", "threshold", "bit", "synced"]


class TraceWriter:
    """CSV slicer trace, one row per bit. Write failures raise OutputError."""

    def __init__(self, path: str):
        self.path = path
        try:
            self._file = open(path, "w", newline="")
            self._writer = csv.writer(self._file)
            self._writer.writerow(TRACE_FIELDS)
        except OSError as e:
            raise OutputError(f"Cannot write trace {path}: {e}") from e

    def write(self, record: TraceRecord) -> None:
        try:
            self._writer.writerow([record.sample_index, record.sample, record.threshold,
                                   int(record.bit), int(record.synced)])
        except OSError as e:
            raise OutputError(f"Cannot write trace {self.path}: {e}") from e

    def close(self) -> None:
        # Buffered rows are only flushed here, so a full disk often shows up now
        try:
            self._file.close()
        except OSError as e:
            raise OutputError(f"Cannot write trace {self.path}: {e}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ukhasnet-decoder",
        description="Decode UKHASnet packets from rtl_fm output "
                    "(signed 16-bit little-endian samples).",
        epilog="example: rtl_fm -f 433961890 -s 64k -g 0 -p 162 | ukhasnet-decoder -v -s 64000"
    )
    parser.add_argument(
        "-s", "--sample-rate", type=int, default=DEFAULT_SAMPLE_RATE,
        help=f"sample rate in Hz, above {2 * BIT_RATE} Hz and a multiple "
             f"of {BIT_RATE} Hz (default: %(default)s)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="print sync, length and checksum diagnostics"
    )
    parser.add_argument(
        "-i", "--input", default="-",
        help="sample source: -, FILE, file:PATH, serial:PORT:BAUD or "
             "tcp:HOST:PORT (default: stdin)"
    )
    parser.add_argument(
        "--trace", metavar="FILE",
        help="write slicer state at every bit as CSV, for plotting"
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="library log level (default: %(default)s)"
    )
    return parser


def main(
    argv: Optional[List[str]] = None,
    stdout: Optional[BinaryIO] = None,
    stderr: Optional[TextIO] = None
) -> int:
    """
    Command line entry point.

    Args:
        argv: Arguments (default sys.argv[1:])
        stdout: Binary packet output (default sys.stdout.buffer)
        stderr: Text status output (default sys.stderr)

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    out = stdout if stdout is not None else sys.stdout.buffer
    err = stderr if stderr is not None else sys.stderr

    configure_logging(args.log_level)
    print("UKHAS decoder using rtl_fm", file=err)

    try:
        config = DecoderConfig(sample_rate=args.sample_rate, verbose=args.verbose)
    except ConfigurationError as e:
        print(f"Illegal sampling rate - {args.sample_rate}.", file=err)
        print(f"Must be over {2 * BIT_RATE} Hz and a multiple of {BIT_RATE} Hz.", file=err)
        logger.debug(f"Configuration rejected: {e}")
        return EXIT_CONFIG

    print(f"Sample rate: {config.sample_rate} Hz", file=err)
    if config.verbose:
        print("Verbose mode", file=err)
    print("", file=err)

    decoder = Decoder(config)

    def write_line(line: bytes) -> None:
        try:
            out.write(line)
            out.flush()
        except OSError as e:
            raise OutputError(f"Cannot write packet output: {e}") from e

    def on_packet(packet: DecodedPacket) -> None:
        write_line(format_packet_line(packet.timestamp, packet.payload))

    def on_diagnostic(diagnostic: Diagnostic) -> None:
        line = f"{format_timestamp(diagnostic.timestamp)} {diagnostic.message}\n"
        write_line(line.encode("ascii"))

    decoder.register_packet_callback(on_packet)
    decoder.register_diagnostic_callback(on_diagnostic)

    status = EXIT_OK
    trace = None
    try:
        if args.trace:
            trace = TraceWriter(args.trace)
            decoder.register_trace_callback(trace.write)

        with create_source(args.input) as source:
            decoder.run(source)
    except TransportError as e:
        print(f"Input error: {e}", file=err)
        status = EXIT_IO
    except OutputError as e:
        print(f"Output error: {e}", file=err)
        status = EXIT_IO
    except KeyboardInterrupt:
        logger.info("Interrupt received - shutting down...")

    if trace is not None:
        try:
            trace.close()
        except OutputError as e:
            if status == EXIT_OK:
                print(f"Output error: {e}", file=err)
            status = EXIT_IO

    if status != EXIT_OK:
        return status

    stats = decoder.stats
    print(f"{stats.samples} samples in {int(stats.elapsed)} sec", file=err)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
