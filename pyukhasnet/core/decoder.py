# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pyukhasnet.core.decoder.py

Complete sample-to-packet decode pipeline.

Implements:
- Explicit decoder state (slicer, framer, assembler) instead of globals
- Raw byte stream to sample pairing across arbitrary chunk boundaries
- Packet, diagnostic and trace callbacks
- Run statistics

Single threaded: each sample is sliced and, at bit boundaries, pushed
through the framer and assembler before the next sample is read.
"""

from __future__ import annotations

import time
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .assembler import PacketAssembler, RejectReason, Rejection
from .config import DEFAULT_CONFIG, DecoderConfig
from .exceptions import OutputError, TransportError
from .framer import SyncFramer
from .framing import MAX_PAYLOAD, Packet
from .slicer import SAMPLE_SIZE, BitSlicer, decode_samples

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096


class DiagnosticKind(Enum):
    """Diagnostic event types (reported in verbose mode)"""
    SYNC = "sync"
    LENGTH = "length"
    CHECKSUM_MISMATCH = "checksum_mismatch"
    OVERSIZE = "oversize"


@dataclass(frozen=True)
class DecodedPacket:
    """Accepted packet with its reception time (seconds since the epoch)"""
    timestamp: float
    payload: bytes
    crc: int


@dataclass(frozen=True)
class Diagnostic:
    """
    Decoder diagnostic event.

    Attributes:
        kind: Event type
        timestamp: Wall-clock time of the event
        message: Human readable description
        value: Matched sync register (SYNC) or declared length
            (LENGTH/OVERSIZE/CHECKSUM_MISMATCH)
        received: Received checksum (CHECKSUM_MISMATCH only)
        computed: Computed checksum (CHECKSUM_MISMATCH only)
    """

    kind: DiagnosticKind
    timestamp: float
    message: str
    value: Optional[int] = None
    received: Optional[int] = None
    computed: Optional[int] = None


@dataclass(frozen=True)
class TraceRecord:
    """Slicer state at one decimated bit, for plotting"""
    sample_index: int
    sample: int
    threshold: int
    bit: bool
    synced: bool


@dataclass
class DecoderStatistics:
    """Counters for one decoder run"""
    samples: int = 0
    bits: int = 0
    syncs: int = 0
    packets: int = 0
    checksum_errors: int = 0
    oversize: int = 0
    elapsed: float = 0.0


class Decoder:
    """
    UKHASnet packet decoder.

    Args:
        config: Decoder configuration (already validated)
        clock: Wall-clock source for packet and diagnostic timestamps
    """

    def __init__(
        self,
        config: DecoderConfig = DEFAULT_CONFIG,
        clock: Callable[[], float] = time.time
    ):
        self.config = config
        self._clock = clock
        self.stats = DecoderStatistics()

        self.slicer = BitSlicer(config.oversampling)
        self.assembler = PacketAssembler(
            on_packet=self._handle_packet,
            on_reject=self._handle_reject,
            on_length=self._handle_length
        )
        self.framer = SyncFramer(self.assembler, on_sync=self._handle_sync)

        self._pending = b""
        self._packet_callbacks: List[Callable[[DecodedPacket], None]] = []
        self._diagnostic_callbacks: List[Callable[[Diagnostic], None]] = []
        self._trace_callbacks: List[Callable[[TraceRecord], None]] = []

        logger.info(f"Initialized decoder at {config.sample_rate} Hz "
                    f"(oversampling {config.oversampling})")

    def register_packet_callback(self, callback: Callable[[DecodedPacket], None]) -> None:
        """Register callback for accepted packets"""
        self._packet_callbacks.append(callback)

    def register_diagnostic_callback(self, callback: Callable[[Diagnostic], None]) -> None:
        """Register callback for diagnostics (delivered only when config.verbose)"""
        self._diagnostic_callbacks.append(callback)

    def register_trace_callback(self, callback: Callable[[TraceRecord], None]) -> None:
        """Register callback receiving slicer state at every bit"""
        self._trace_callbacks.append(callback)

    def feed_sample(self, sample: int) -> None:
        """Push one signed 16-bit sample through the pipeline"""
        self.stats.samples += 1
        bit = self.slicer.process(sample)
        if bit is None:
            return

        self.stats.bits += 1
        self.framer.push_bit(bit)
        if self._trace_callbacks:
            record = TraceRecord(
                sample_index=self.stats.samples - 1,
                sample=sample,
                threshold=self.slicer.threshold,
                bit=bit,
                synced=self.framer.synced
            )
            self._dispatch(self._trace_callbacks, record)

    def feed_bytes(self, data: bytes) -> None:
        """
        Push raw little-endian sample bytes.

        An odd trailing byte is kept and paired with the first byte of the
        next call.
        """
        data = bytes(data)
        if self._pending:
            data = self._pending + data
        usable = len(data) - (len(data) % SAMPLE_SIZE)
        self._pending = bytes(data[usable:])
        for sample in decode_samples(data[:usable]):
            self.feed_sample(sample)

    def run(self, source, chunk_size: int = DEFAULT_CHUNK_SIZE) -> DecoderStatistics:
        """
        Decode a sample source until it reports end of stream.

        Args:
            source: Open sample source (see pyukhasnet.interfaces)
            chunk_size: Read size in bytes

        Returns:
            Statistics for the run

        Raises:
            TransportError: If the source is not open or fails
            OutputError: If a consumer could not write its output
        """
        if not source.is_open:
            raise TransportError(f"{source!r} is not open")
        start = time.monotonic()
        try:
            for chunk in source.chunks(chunk_size):
                self.feed_bytes(chunk)
        finally:
            self.stats.elapsed += time.monotonic() - start
        if self._pending:
            logger.debug("Discarding incomplete trailing sample byte")
            self._pending = b""
        logger.info(f"{self.stats.samples} samples, {self.stats.packets} packets "
                    f"in {self.stats.elapsed:.1f} sec")
        return self.stats

    def reset(self) -> None:
        """
        Start over on a new, discontinuous sample stream.

        Clears the threshold, decimation phase, sync search and any packet
        session in progress. Statistics are kept.
        """
        self.slicer.reset()
        self.framer.reset()
        self._pending = b""
        logger.debug("Decoder reset")

    def _handle_sync(self, register: int) -> None:
        self.stats.syncs += 1
        self._diagnose(DiagnosticKind.SYNC, f"Sync: {register:04X}", value=register)

    def _handle_length(self, length: int) -> None:
        self._diagnose(DiagnosticKind.LENGTH, f"Parsing {length} bytes", value=length)

    def _handle_packet(self, packet: Packet) -> None:
        self.stats.packets += 1
        decoded = DecodedPacket(self._clock(), packet.payload, packet.crc)
        logger.info(f"Packet: {packet.text}")
        self._dispatch(self._packet_callbacks, decoded)

    def _handle_reject(self, rejection: Rejection) -> None:
        if rejection.reason == RejectReason.OVERSIZE:
            self.stats.oversize += 1
            self._diagnose(
                DiagnosticKind.OVERSIZE,
                f"Length: {rejection.length} > {MAX_PAYLOAD}, skip",
                value=rejection.length
            )
        else:
            self.stats.checksum_errors += 1
            self._diagnose(
                DiagnosticKind.CHECKSUM_MISMATCH,
                f"CRC mismatch: read({rejection.received:04X}), "
                f"computed({rejection.computed:04X})",
                value=rejection.length,
                received=rejection.received,
                computed=rejection.computed
            )

    def _diagnose(self, kind: DiagnosticKind, message: str, **values) -> None:
        if not self.config.verbose or not self._diagnostic_callbacks:
            return
        diagnostic = Diagnostic(kind, self._clock(), message, **values)
        self._dispatch(self._diagnostic_callbacks, diagnostic)

    @staticmethod
    def _dispatch(callbacks: List[Callable], event) -> None:
        for callback in callbacks:
            try:
                callback(event)
            except OutputError:
                raise
            except Exception as e:
                logger.error(f"Decoder callback failed: {e}")

    def __repr__(self) -> str:
        return (f"Decoder(sample_rate={self.config.sample_rate}, "
                f"state={self.framer.state.name}, packets={self.stats.packets})")
