# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pyukhasnet.core.crc.py

CRC-16 as used by RFM69 radios on UKHASnet.

XMODEM polynomial (0x1021), MSB first, but seeded with 0x1D0F. There are
many CRC-CCITT flavours (XModem, 0xFFFF, 0x1D0F, Kermit); only this one
matches the nodes.
"""

from typing import Iterable

CRC_SEED = 0x1D0F
CRC_POLY = 0x1021


def crc_update(crc: int, byte: int) -> int:
    """
    Fold one byte into a running CRC.

    Args:
        crc: Current 16-bit CRC value
        byte: Next input byte (0-255)

    Returns:
        Updated 16-bit CRC value
    """
    crc ^= (byte & 0xFF) << 8
    for _ in range(8):
        if crc & 0x8000:
            crc = ((crc << 1) ^ CRC_POLY) & 0xFFFF
        else:
            crc = (crc << 1) & 0xFFFF
    return crc


def crc_calc(data: Iterable[int], seed: int = CRC_SEED) -> int:
    """Calculate the CRC of a complete byte sequence"""
    crc = seed
    for byte in data:
        crc = crc_update(crc, byte)
    return crc


def wire_checksum(crc: int) -> int:
    """
    Convert between a computed CRC and the value carried on the wire.

    Received checksums only match after being subtracted from 0xFFFF. The
    reason is unknown (inverting every bit of the frame does not explain
    it), so keep this until verified against captured traffic.
    """
    return 0xFFFF - (crc & 0xFFFF)
