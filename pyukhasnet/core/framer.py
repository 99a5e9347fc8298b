# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pyukhasnet.core.framer.py

Bit-level sync search and byte framing.

While SEARCHING every bit is shifted into a 16-bit register and compared
with the sync word (or its complement). A match switches to SYNCED, where
bits are grouped MSB first into bytes for the packet assembler until the
assembler ends its session.

No bit-error tolerance on the sync word and no bit-slip recovery inside a
packet: every session end goes back to a full sync search.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from .assembler import AssemblerState, PacketAssembler, is_terminal
from .exceptions import OutputError
from .framing import SYNC_WORD, SYNC_WORD_INVERTED

logger = logging.getLogger(__name__)

BITS_PER_BYTE = 8


class SyncState(Enum):
    """Framer states"""
    SEARCHING = 0
    SYNCED = 1


class SyncFramer:
    """
    Sync word detector and byte framer.

    Args:
        assembler: Packet assembler receiving framed bytes
        on_sync: Called with the matched 16-bit register value
    """

    def __init__(
        self,
        assembler: Optional[PacketAssembler] = None,
        on_sync: Optional[Callable[[int], None]] = None
    ):
        self.assembler = assembler or PacketAssembler()
        self.on_sync = on_sync

        self.state = SyncState.SEARCHING
        self.register = 0
        self.byte = 0
        self.bits_remaining = BITS_PER_BYTE

    @property
    def synced(self) -> bool:
        return self.state == SyncState.SYNCED

    def push_bit(self, bit: bool) -> Optional[AssemblerState]:
        """
        Process one sliced bit.

        Returns:
            The assembler state if this bit completed a byte, else None
        """
        if self.state == SyncState.SEARCHING:
            self._search(bit)
            return None

        self.byte = ((self.byte << 1) | int(bit)) & 0xFF
        self.bits_remaining -= 1
        if self.bits_remaining >= 1:
            return None

        self.bits_remaining = BITS_PER_BYTE
        result = self.assembler.push_byte(self.byte)
        if is_terminal(result):
            self._change_state(SyncState.SEARCHING)
        return result

    def _search(self, bit: bool) -> None:
        self.register = ((self.register << 1) | int(bit)) & 0xFFFF
        if self.register not in (SYNC_WORD, SYNC_WORD_INVERTED):
            return

        # Complemented sync keeps normal bit polarity; inversion is unverified
        logger.debug(f"Sync: {self.register:04X}")
        self._change_state(SyncState.SYNCED)
        self.bits_remaining = BITS_PER_BYTE
        self.assembler.reset()
        if self.on_sync:
            try:
                self.on_sync(self.register)
            except OutputError:
                raise
            except Exception as e:
                logger.error(f"Sync callback failed: {e}")

    def _change_state(self, new_state: SyncState) -> None:
        old_state = self.state
        self.state = new_state
        logger.debug(f"Framer state change: {old_state.name} -> {new_state.name}")

    def reset(self) -> None:
        """Drop any session and clear the sync register"""
        self.state = SyncState.SEARCHING
        self.register = 0
        self.byte = 0
        self.bits_remaining = BITS_PER_BYTE
        self.assembler.reset()

    def __repr__(self) -> str:
        return (f"SyncFramer({self.state.name}, register=0x{self.register:04X}, "
                f"bits_remaining={self.bits_remaining})")
