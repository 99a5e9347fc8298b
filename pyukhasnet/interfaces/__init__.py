# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
PyUKHASnet Sample Sources

Provides:
- Stream (stdin) and capture file sources
- Serial port source
- TCP source
- Factory from a connection string
"""

import re

from .source import BaseSampleSource, StreamSampleSource, FileSampleSource
from .serial_source import SerialSampleSource
from .tcp_source import TCPSampleSource
from ..core.exceptions import TransportError

__all__ = [
    'BaseSampleSource',
    'StreamSampleSource',
    'FileSampleSource',
    'SerialSampleSource',
    'TCPSampleSource',
    'create_source'
]

# A drive letter such as "C:" is one character, so it is not a scheme
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]+:")


def create_source(connection_string: str, **kwargs) -> BaseSampleSource:
    """
    Create a sample source from a connection string.

    Formats:
    - Standard input: "-" or "stdin"
    - File: "file:/path/to/capture.raw" or a bare path, "C:\\capture.raw" included
    - Serial: "serial:/dev/ttyUSB0:921600"
    - TCP: "tcp:localhost:7355"

    Args:
        connection_string: Source-specific connection string
        **kwargs: Additional source options

    Returns:
        Unopened sample source
    """
    if connection_string in ("-", "stdin"):
        return StreamSampleSource(**kwargs)
    if connection_string.startswith("file:"):
        return FileSampleSource(connection_string[len("file:"):], **kwargs)
    if connection_string.startswith("serial:"):
        try:
            _, port, baud = connection_string.rsplit(":", 2)
            return SerialSampleSource(port, int(baud), **kwargs)
        except ValueError as e:
            raise TransportError(f"Bad serial source: {connection_string}") from e
    if connection_string.startswith("tcp:"):
        try:
            _, host, port = connection_string.split(":")
            return TCPSampleSource(host, int(port), **kwargs)
        except ValueError as e:
            raise TransportError(f"Bad TCP source: {connection_string}") from e
    if _SCHEME.match(connection_string):
        raise TransportError(f"Unknown source: {connection_string}")
    return FileSampleSource(connection_string, **kwargs)
