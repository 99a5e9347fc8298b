# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pyukhasnet.core.assembler.py

Byte-level packet assembler.

One session runs per sync acquisition:

    AWAIT_LENGTH -> READ_PAYLOAD -> READ_CRC_HI -> READ_CRC_LO -> ACCEPTED
                                                              \\-> REJECTED

An oversized length is rejected straight from AWAIT_LENGTH. Every terminal
state ends the session; the framer must resynchronise before the next
packet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .crc import CRC_SEED, crc_update, wire_checksum
from .exceptions import AssemblerStateError, OutputError
from .framing import MAX_PAYLOAD, Packet

logger = logging.getLogger(__name__)


class AssemblerState(Enum):
    """Packet session states"""
    AWAIT_LENGTH = 0
    READ_PAYLOAD = 1
    READ_CRC_HI = 2
    READ_CRC_LO = 3
    ACCEPTED = 4
    REJECTED = 5


TERMINAL_STATES = frozenset({AssemblerState.ACCEPTED, AssemblerState.REJECTED})


def is_terminal(state: AssemblerState) -> bool:
    """True if the state ends the packet session"""
    return state in TERMINAL_STATES


class RejectReason(Enum):
    """Why a packet session was rejected"""
    OVERSIZE = "oversize"
    CHECKSUM = "checksum"


@dataclass(frozen=True)
class Rejection:
    """
    Details of a rejected packet session.

    Attributes:
        reason: Rejection cause
        length: Declared payload length
        received: Received checksum after polarity correction (CHECKSUM only)
        computed: Locally computed checksum (CHECKSUM only)
    """

    reason: RejectReason
    length: int
    received: Optional[int] = None
    computed: Optional[int] = None


class PacketAssembler:
    """
    Parse length, payload and checksum from a byte-aligned stream.

    The payload buffer is allocated once and reused by every session.

    Args:
        on_packet: Called with each accepted Packet
        on_reject: Called with a Rejection for oversize or bad checksum
        on_length: Called with the declared length once it is accepted
    """

    def __init__(
        self,
        on_packet: Optional[Callable[[Packet], None]] = None,
        on_reject: Optional[Callable[[Rejection], None]] = None,
        on_length: Optional[Callable[[int], None]] = None
    ):
        self.on_packet = on_packet
        self.on_reject = on_reject
        self.on_length = on_length

        self._buffer = bytearray(MAX_PAYLOAD)
        self.reset()

    def reset(self) -> None:
        """Start a new session (called on sync acquisition)"""
        self.state = AssemblerState.AWAIT_LENGTH
        self.length = 0
        self.offset = 0
        self.crc = CRC_SEED
        self.received_crc = 0

    @property
    def payload(self) -> bytes:
        """Payload bytes collected so far in this session"""
        return bytes(self._buffer[:self.offset])

    def push_byte(self, byte: int) -> AssemblerState:
        """
        Process one framed byte.

        Returns:
            The session state after this byte

        Raises:
            AssemblerStateError: If the session already terminated
        """
        byte &= 0xFF
        if self.state == AssemblerState.AWAIT_LENGTH:
            self._read_length(byte)
        elif self.state == AssemblerState.READ_PAYLOAD:
            self._buffer[self.offset] = byte
            self.offset += 1
            self.crc = crc_update(self.crc, byte)
            if self.offset == self.length:
                self.state = AssemblerState.READ_CRC_HI
        elif self.state == AssemblerState.READ_CRC_HI:
            self.received_crc = byte << 8
            self.state = AssemblerState.READ_CRC_LO
        elif self.state == AssemblerState.READ_CRC_LO:
            self.received_crc |= byte
            self._verify()
        else:
            raise AssemblerStateError(f"Session already ended in state {self.state.name}")
        return self.state

    def _read_length(self, byte: int) -> None:
        self.length = byte
        self.crc = crc_update(self.crc, byte)
        if self.length > MAX_PAYLOAD:
            logger.debug(f"Length: {self.length} > {MAX_PAYLOAD}, skip")
            self.state = AssemblerState.REJECTED
            self._notify(self.on_reject, Rejection(RejectReason.OVERSIZE, self.length))
            return

        logger.debug(f"Parsing {self.length} bytes")
        self._notify(self.on_length, self.length)
        if self.length == 0:
            self.state = AssemblerState.READ_CRC_HI
        else:
            self.state = AssemblerState.READ_PAYLOAD

    def _verify(self) -> None:
        received = wire_checksum(self.received_crc)
        if received == self.crc:
            self.state = AssemblerState.ACCEPTED
            packet = Packet(self.length, self.payload, self.crc)
            logger.debug(f"Accepted {packet}")
            self._notify(self.on_packet, packet)
        else:
            logger.debug(f"CRC mismatch: read({received:04X}), computed({self.crc:04X})")
            self.state = AssemblerState.REJECTED
            self._notify(
                self.on_reject,
                Rejection(RejectReason.CHECKSUM, self.length, received, self.crc)
            )

    @staticmethod
    def _notify(callback: Optional[Callable], value) -> None:
        if callback:
            try:
                callback(value)
            except OutputError:
                raise
            except Exception as e:
                logger.error(f"Assembler callback failed: {e}")

    def __repr__(self) -> str:
        return (f"PacketAssembler({self.state.name}, length={self.length}, "
                f"offset={self.offset}, crc=0x{self.crc:04X})")
