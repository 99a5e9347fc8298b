# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
PyUKHASnet Core Module - UKHASnet Layer 1 Decoder

Contains:
- CRC-16 (XMODEM polynomial, 0x1D0F seed)
- Adaptive threshold bit slicer
- Sync word detection and byte framing
- Packet assembler with checksum verification
- Decoder pipeline composing the above
"""

from .crc import CRC_SEED, CRC_POLY, crc_update, crc_calc, wire_checksum
from .config import BIT_RATE, DecoderConfig, DEFAULT_CONFIG, validate_sample_rate
from .slicer import BitSlicer, decode_samples, synthesize_samples
from .framing import (
    Packet,
    SYNC_WORD,
    SYNC_WORD_INVERTED,
    MAX_PAYLOAD,
    build_frame,
    bytes_to_bits,
    frame_bits
)
from .assembler import (
    PacketAssembler,
    AssemblerState,
    RejectReason,
    Rejection
)
from .framer import SyncFramer, SyncState
from .decoder import (
    Decoder,
    DecodedPacket,
    Diagnostic,
    DiagnosticKind,
    DecoderStatistics,
    TraceRecord
)
from .exceptions import (
    UKHASnetError,
    ConfigurationError,
    FrameError,
    PayloadTooLongError,
    AssemblerStateError,
    TransportError,
    OutputError
)

__all__ = [
    # CRC
    'CRC_SEED',
    'CRC_POLY',
    'crc_update',
    'crc_calc',
    'wire_checksum',

    # Configuration
    'BIT_RATE',
    'DecoderConfig',
    'DEFAULT_CONFIG',
    'validate_sample_rate',

    # Slicing and framing
    'BitSlicer',
    'decode_samples',
    'synthesize_samples',
    'Packet',
    'SYNC_WORD',
    'SYNC_WORD_INVERTED',
    'MAX_PAYLOAD',
    'build_frame',
    'bytes_to_bits',
    'frame_bits',

    # State machines
    'PacketAssembler',
    'AssemblerState',
    'RejectReason',
    'Rejection',
    'SyncFramer',
    'SyncState',

    # Pipeline
    'Decoder',
    'DecodedPacket',
    'Diagnostic',
    'DiagnosticKind',
    'DecoderStatistics',
    'TraceRecord',

    # Exceptions
    'UKHASnetError',
    'ConfigurationError',
    'FrameError',
    'PayloadTooLongError',
    'AssemblerStateError',
    'TransportError',
    'OutputError'
]
