# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pyukhasnet.core.config.py

Decoder configuration.

The radio link runs at a fixed 2000 bit/s. The only tunable is the sample
rate of the demodulated input, which must be an exact multiple of the bit
rate and give at least two samples per bit. Validation happens when the
configuration is built, i.e. before any sample is read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# UKHASnet layer 1: https://www.ukhas.net/wiki/protocol_details
BIT_RATE = 2000
DEFAULT_SAMPLE_RATE = 64000
MIN_OVERSAMPLING = 2


@dataclass(frozen=True)
class DecoderConfig:
    """
    Immutable decoder configuration.

    Attributes:
        sample_rate: Input sample rate in Hz
        verbose: Emit sync/length/checksum diagnostics
    """

    sample_rate: int = DEFAULT_SAMPLE_RATE
    verbose: bool = False

    def __post_init__(self) -> None:
        validate_sample_rate(self.sample_rate)
        logger.debug(
            f"DecoderConfig: sample_rate={self.sample_rate} Hz, "
            f"oversampling={self.oversampling}, verbose={self.verbose}"
        )

    @property
    def oversampling(self) -> int:
        """Number of input samples per transmitted bit"""
        return self.sample_rate // BIT_RATE


def validate_sample_rate(sample_rate: int) -> None:
    """
    Check that a sample rate can be decimated to the link bit rate.

    Raises:
        ConfigurationError: If the rate is not an integer multiple of
            BIT_RATE of at least MIN_OVERSAMPLING * BIT_RATE
    """
    if isinstance(sample_rate, bool) or not isinstance(sample_rate, int):
        raise ConfigurationError(f"Sample rate must be an integer, got {sample_rate!r}")
    if sample_rate < MIN_OVERSAMPLING * BIT_RATE or sample_rate % BIT_RATE != 0:
        raise ConfigurationError(
            f"Illegal sampling rate - {sample_rate}. "
            f"Must be over {MIN_OVERSAMPLING * BIT_RATE} Hz and a multiple of {BIT_RATE} Hz."
        )


DEFAULT_CONFIG = DecoderConfig()
