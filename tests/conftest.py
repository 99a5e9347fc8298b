# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
Common test fixtures and project-wide test configuration.
"""

import logging
from typing import Callable, Generator, List

import pytest

from pyukhasnet.core.config import DecoderConfig
from pyukhasnet.core.framing import frame_bits
from pyukhasnet.core.slicer import synthesize_samples

FIXED_TIME = 1700000000.0


@pytest.fixture(scope="session", autouse=True)
def configure_logging() -> Generator[None, None, None]:
    """Configure logging for all tests"""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    yield


@pytest.fixture
def config_8k() -> DecoderConfig:
    """4 samples per bit keeps synthesized streams small"""
    return DecoderConfig(sample_rate=8000)


@pytest.fixture
def verbose_config_8k() -> DecoderConfig:
    return DecoderConfig(sample_rate=8000, verbose=True)


@pytest.fixture
def fixed_clock() -> Callable[[], float]:
    return lambda: FIXED_TIME


@pytest.fixture
def air_samples() -> Callable[..., bytes]:
    """Build the raw sample stream for one or more payloads"""
    def _build(*payloads: bytes, oversampling: int = 4) -> bytes:
        bits: List[int] = []
        for payload in payloads:
            bits += frame_bits(payload)
        return synthesize_samples(bits, oversampling)
    return _build


def pytest_configure(config: pytest.Config) -> None:
    """Pytest configuration hook"""
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow running"
    )
