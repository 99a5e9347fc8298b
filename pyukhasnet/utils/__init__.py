# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
PyUKHASnet Utilities Module

Provides logging setup and output formatting shared by the command line
tool and examples.
"""

import logging
import time
from typing import List, Optional

__all__: List[str] = [
    'configure_logging',
    'format_timestamp',
    'format_packet_line'
]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure package-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )


def format_timestamp(timestamp: Optional[float] = None) -> str:
    """Local time as 'YYYY-mm-dd HH:MM:SS' (now if no timestamp given)"""
    if timestamp is None:
        timestamp = time.time()
    return time.strftime(TIMESTAMP_FORMAT, time.localtime(timestamp))


def format_packet_line(timestamp: float, payload: bytes) -> bytes:
    """Output line for a packet; the payload is written verbatim"""
    return format_timestamp(timestamp).encode("ascii") + b" PACKET " + payload + b"\n"
