# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
Serial Sample Source

Reads raw demodulated samples from a serial-attached demodulator.
"""

import serial
import logging
from typing import Optional

from ..core.exceptions import TransportError
from .source import BaseSampleSource

logger = logging.getLogger(__name__)


class SerialSampleSource(BaseSampleSource):
    """
    Serial port sample source.

    A read timeout with no data is not end of stream; the port is polled
    again until it is closed or fails.

    Args:
        port: Serial device (e.g. /dev/ttyUSB0)
        baudrate: Line speed
        timeout: Read timeout in seconds
    """

    def __init__(self, port: str, baudrate: int = 921600, timeout: float = 1.0):
        super().__init__()
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self._serial: Optional[serial.Serial] = None

    def open(self) -> None:
        try:
            self._serial = serial.Serial(
                port=self.port,
                baudrate=self.baudrate,
                timeout=self.timeout
            )
            logger.info(f"Opened serial port {self.port}@{self.baudrate}")
        except serial.SerialException as e:
            raise TransportError(f"Serial open failed: {e}") from e
        self._open = True

    def close(self) -> None:
        if self._serial:
            self._serial.close()
            self._serial = None
            logger.info("Closed serial port")
        self._open = False

    def read(self, size: int) -> bytes:
        if not self._serial or not self._serial.is_open:
            return b""
        try:
            while self._serial.is_open:
                data = self._serial.read(max(1, min(size, self._serial.in_waiting)))
                if data:
                    return data
        except serial.SerialException as e:
            raise TransportError(f"Serial read failed: {e}") from e
        return b""

    def __repr__(self) -> str:
        return f"SerialSampleSource({self.port!r}, baudrate={self.baudrate})"
