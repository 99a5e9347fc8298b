# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
tests/test_slicer.py

Unit tests for sample unpacking and the adaptive bit slicer.
"""

import struct

import pytest

from pyukhasnet.core.framing import frame_bits
from pyukhasnet.core.slicer import (
    BitSlicer,
    _div_trunc,
    decode_samples,
    synthesize_samples,
)


def test_decode_samples_little_endian():
    assert decode_samples(b"\x01\x00\xff\xff\x00\x80") == [1, -1, -32768]


def test_decode_samples_ignores_trailing_byte():
    assert decode_samples(b"\x02\x00\x07") == [2]
    assert decode_samples(b"") == []


@pytest.mark.parametrize("a,b,expected", [
    (17, 16, 1),
    (-17, 16, -1),
    (-15, 16, 0),
    (32, 16, 2),
    (-32, 16, -2),
])
def test_div_trunc_rounds_toward_zero(a, b, expected):
    assert _div_trunc(a, b) == expected


def test_invalid_oversampling():
    with pytest.raises(ValueError):
        BitSlicer(1)


def test_threshold_update_and_decimation():
    slicer = BitSlicer(2)
    # window = 16 samples
    assert slicer.process(1600) is None
    assert slicer.threshold == 100
    assert slicer.process(1600) is True
    assert slicer.threshold == (1600 + 15 * 100) // 16


def test_negative_threshold_truncates():
    slicer = BitSlicer(2)
    slicer.process(-17)
    assert slicer.threshold == -1


def test_one_bit_per_oversampling_period():
    slicer = BitSlicer(4)
    results = [slicer.process(100) for _ in range(12)]
    assert [i for i, bit in enumerate(results) if bit is not None] == [3, 7, 11]


def test_bit_uses_updated_threshold():
    slicer = BitSlicer(2)
    slicer.threshold = 1000
    slicer.process(0)
    # threshold is now 937
    assert slicer.process(950) is True
    slicer.threshold = 1000
    slicer._countdown = 1
    assert slicer.process(900) is False


def test_reset():
    slicer = BitSlicer(3)
    slicer.process(5000)
    slicer.reset()
    assert slicer.threshold == 0
    assert [slicer.process(10) for _ in range(3)][-1] is True


def test_synthesize_samples_layout():
    data = synthesize_samples([1, 0], oversampling=2, amplitude=100)
    assert struct.unpack("<4h", data) == (100, 100, -100, -100)


def test_synthesize_rejects_bad_amplitude():
    with pytest.raises(ValueError):
        synthesize_samples([1], 2, amplitude=40000)


@pytest.mark.parametrize("oversampling", [2, 4, 32])
def test_slicer_recovers_synthesized_bits(oversampling):
    bits = frame_bits(b"\xff\xff\x00\x00hello")
    slicer = BitSlicer(oversampling)
    sliced = []
    for sample in decode_samples(synthesize_samples(bits, oversampling)):
        bit = slicer.process(sample)
        if bit is not None:
            sliced.append(int(bit))
    assert sliced == bits
