# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pyukhasnet.core.exceptions.py

Exception hierarchy for the UKHASnet decoder.

Only conditions that stop processing are exceptions. Oversized length
declarations and checksum mismatches are ordinary decode outcomes and are
reported as rejections/diagnostics, never raised.
"""


class UKHASnetError(Exception):
    """Base exception for all decoder errors"""


class ConfigurationError(UKHASnetError):
    """Invalid decoder configuration (e.g. unsupported sample rate)"""


class FrameError(UKHASnetError):
    """Base exception for frame construction/parsing errors"""


class PayloadTooLongError(FrameError, ValueError):
    """Payload does not fit in a single UKHASnet frame"""


class AssemblerStateError(FrameError):
    """Byte pushed into a packet session that has already terminated"""


class TransportError(UKHASnetError):
    """Sample source could not be opened or read"""


class OutputError(UKHASnetError):
    """
    Packet, diagnostic or trace output could not be written.

    Raised from a consumer callback to stop decoding; callback error
    containment lets it through.
    """
