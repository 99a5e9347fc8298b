# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pyukhasnet.core.slicer.py

Sample-to-bit slicing for the demodulated FSK signal.

Handles:
- Little-endian int16 sample unpacking
- Adaptive threshold (moving average over an 8 bit window)
- Decimation to one bit per `oversampling` samples
- Synthetic sample generation for loopback testing
"""

from __future__ import annotations

import struct
import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 2
THRESHOLD_WINDOW_BITS = 8
DEFAULT_AMPLITUDE = 8000


def _div_trunc(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero"""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


def decode_samples(data: bytes) -> List[int]:
    """
    Unpack raw input bytes into signed 16-bit samples.

    A trailing odd byte is ignored; callers streaming in chunks must carry
    it over themselves.
    """
    count = len(data) // SAMPLE_SIZE
    return list(struct.unpack(f"<{count}h", data[:count * SAMPLE_SIZE]))


def synthesize_samples(bits: Iterable[int], oversampling: int,
                       amplitude: int = DEFAULT_AMPLITUDE) -> bytes:
    """
    Build a raw sample stream carrying the given bits.

    Each bit is held for `oversampling` samples at +amplitude (1) or
    -amplitude (0). The slicer threshold never leaves the open interval
    (-amplitude, amplitude), so slicing recovers the bits exactly.
    """
    if not 0 < amplitude <= 0x7FFF:
        raise ValueError(f"Amplitude {amplitude} out of int16 range")
    samples = []
    for bit in bits:
        samples.extend([amplitude if bit else -amplitude] * oversampling)
    return struct.pack(f"<{len(samples)}h", *samples)


class BitSlicer:
    """
    Adaptive threshold bit slicer.

    The threshold is a moving average of every sample over an 8 bit
    window, which assumes the packet has enough bit transitions. Only the
    last sample of each bit period is compared against it.

    Args:
        oversampling: Samples per bit (sample rate / bit rate), at least 2
    """

    def __init__(self, oversampling: int):
        if oversampling < 2:
            raise ValueError(f"Oversampling {oversampling} must be at least 2")
        self.oversampling = oversampling
        self._window = THRESHOLD_WINDOW_BITS * oversampling
        self.threshold = 0
        self._countdown = oversampling

    def process(self, sample: int) -> Optional[bool]:
        """
        Feed one sample.

        Returns:
            The sliced bit at a decimation boundary, None otherwise
        """
        self.threshold = _div_trunc(sample + (self._window - 1) * self.threshold, self._window)
        self._countdown -= 1
        if self._countdown < 1:
            self._countdown = self.oversampling
            return sample > self.threshold
        return None

    def reset(self) -> None:
        """Forget the threshold and restart decimation"""
        self.threshold = 0
        self._countdown = self.oversampling

    def __repr__(self) -> str:
        return f"BitSlicer(oversampling={self.oversampling}, threshold={self.threshold})"
