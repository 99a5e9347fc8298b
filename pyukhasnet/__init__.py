# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
PyUKHASnet - Pure Python UKHASnet packet decoder

Provides:
- FSK sample slicing, sync detection and packet framing
- CRC-16 validation of UKHASnet packets
- Stream, file, serial and TCP sample sources
- The ukhasnet-decoder command line tool

"""

__version__ = "0.1.0"

# Core decoder functionality
from .core.crc import (
    crc_calc,
    crc_update,
)
from .core.config import (
    DecoderConfig,
    BIT_RATE
)
from .core.decoder import (
    Decoder,
    DecodedPacket,
    Diagnostic,
    DiagnosticKind
)
from .core.framing import (
    Packet,
    build_frame
)

# Sample sources
from .interfaces import (
    create_source,
    StreamSampleSource,
    FileSampleSource,
    SerialSampleSource,
    TCPSampleSource
)

# Exceptions
from .core.exceptions import (
    UKHASnetError,
    ConfigurationError,
    TransportError,
    OutputError
)

# Utilities
from .utils import configure_logging

__all__ = [
    # Core
    'crc_calc',
    'crc_update',
    'DecoderConfig',
    'BIT_RATE',
    'Decoder',
    'DecodedPacket',
    'Diagnostic',
    'DiagnosticKind',
    'Packet',
    'build_frame',

    # Sources
    'create_source',
    'StreamSampleSource',
    'FileSampleSource',
    'SerialSampleSource',
    'TCPSampleSource',

    # Exceptions
    'UKHASnetError',
    'ConfigurationError',
    'TransportError',
    'OutputError',

    # Utilities
    'configure_logging',
    'get_version',

    # Metadata
    '__version__'
]


def get_version() -> str:
    """Return the package version."""
    return __version__
