# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pyukhasnet.core.framing.py

UKHASnet layer 1 frame format and encoder.

On air a packet is:

    preamble (0xAA...) | sync word 0x2DAA | length | payload | CRC hi | CRC lo

The length byte does not count itself or the CRC. The CRC covers the
length byte and payload, seeded with 0x1D0F, and is carried as
0xFFFF - crc. All bits are sent MSB first.

Sync word is 2 bytes according to the RFM69 configuration used by the
UKHASnet firmware, not the 5 bytes of the layer 2 protocol notes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List

from .crc import crc_calc, wire_checksum
from .exceptions import PayloadTooLongError

logger = logging.getLogger(__name__)

# Protocol constants
SYNC_WORD = 0x2DAA
SYNC_WORD_INVERTED = 0xFFFF - SYNC_WORD
PREAMBLE = 0xAAAA
MAX_PAYLOAD = 254
PREAMBLE_BYTES = 4
POSTAMBLE_BYTES = 2


@dataclass(frozen=True)
class Packet:
    """
    A validated UKHASnet packet.

    Attributes:
        length: Declared payload length (0-254)
        payload: Payload bytes, opaque (usually ASCII by convention)
        crc: Checksum computed over length byte and payload
    """

    length: int
    payload: bytes
    crc: int

    @property
    def text(self) -> str:
        """Payload decoded as ASCII, undecodable bytes replaced"""
        return self.payload.decode("ascii", errors="replace")

    def __repr__(self) -> str:
        return f"Packet(length={self.length}, crc=0x{self.crc:04X}, payload={self.payload!r})"


def build_frame(payload: bytes) -> bytes:
    """
    Encode a payload as a frame (length, payload, wire checksum).

    Raises:
        PayloadTooLongError: If payload exceeds MAX_PAYLOAD bytes
    """
    if len(payload) > MAX_PAYLOAD:
        raise PayloadTooLongError(f"Payload {len(payload)} bytes exceeds {MAX_PAYLOAD}")
    body = bytes([len(payload)]) + bytes(payload)
    checksum = wire_checksum(crc_calc(body))
    return body + checksum.to_bytes(2, "big")


def bytes_to_bits(data: Iterable[int]) -> List[int]:
    """Expand bytes to bits, MSB first"""
    bits = []
    for byte in data:
        for i in reversed(range(8)):
            bits.append((byte >> i) & 1)
    return bits


def frame_bits(payload: bytes,
               preamble_bytes: int = PREAMBLE_BYTES,
               sync_word: int = SYNC_WORD,
               postamble_bytes: int = POSTAMBLE_BYTES) -> List[int]:
    """
    Build the complete air bit sequence for a payload.

    Args:
        payload: Packet payload
        preamble_bytes: Number of 0xAA bytes before the sync word
        sync_word: 16-bit sync word to send
        postamble_bytes: Number of 0x00 bytes after the frame

    Returns:
        List of bits (0/1) in transmission order
    """
    air = bytearray([PREAMBLE & 0xFF] * preamble_bytes)
    air += (sync_word & 0xFFFF).to_bytes(2, "big")
    air += build_frame(payload)
    air += bytes(postamble_bytes)
    return bytes_to_bits(air)
