# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
TCP Sample Source

Reads raw samples streamed over TCP, e.g.

    rtl_fm -f 433961890 -s 64k -g 0 -p 162 | nc -l 7355

The peer closing the connection is end of stream.
"""

import socket
import logging
from typing import Optional

from ..core.exceptions import TransportError
from .source import BaseSampleSource

logger = logging.getLogger(__name__)


class TCPSampleSource(BaseSampleSource):
    """
    TCP client sample source.

    Args:
        host: Server hostname/IP
        port: Server port
        timeout: Connect timeout in seconds
    """

    def __init__(self, host: str, port: int = 7355, timeout: float = 5.0):
        super().__init__()
        self.host = host
        self.port = port
        self.timeout = timeout
        self._socket: Optional[socket.socket] = None

    def open(self) -> None:
        try:
            self._socket = socket.create_connection(
                (self.host, self.port),
                timeout=self.timeout
            )
            # Samples may pause for any length of time between packets
            self._socket.settimeout(None)
            logger.info(f"Connected to {self.host}:{self.port}")
        except OSError as e:
            raise TransportError(f"Connection failed: {e}") from e
        self._open = True

    def close(self) -> None:
        if self._socket:
            try:
                self._socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            self._socket.close()
            self._socket = None
            logger.info("Closed TCP connection")
        self._open = False

    def read(self, size: int) -> bytes:
        if not self._socket:
            raise TransportError("Not connected")
        try:
            return self._socket.recv(size)
        except OSError as e:
            raise TransportError(f"Socket error: {e}") from e

    def __repr__(self) -> str:
        return f"TCPSampleSource({self.host!r}, {self.port})"
