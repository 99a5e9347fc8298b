# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
Base Sample Sources

Defines the abstract sample source and the stream/file implementations.
A source delivers raw little-endian int16 sample bytes in arbitrary
chunks; an empty read means end of stream.
"""

import sys
import logging
from abc import ABC, abstractmethod
from typing import BinaryIO, Iterator, Optional

from ..core.exceptions import TransportError

logger = logging.getLogger(__name__)


class BaseSampleSource(ABC):
    """Abstract base class for raw sample sources"""

    def __init__(self):
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @abstractmethod
    def open(self) -> None:
        """Open the underlying medium"""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying medium"""

    @abstractmethod
    def read(self, size: int) -> bytes:
        """
        Read up to `size` bytes.

        Returns:
            Raw sample bytes, empty at end of stream

        Raises:
            TransportError: On read failure
        """

    def chunks(self, size: int = 4096) -> Iterator[bytes]:
        """Yield chunks until end of stream"""
        while True:
            data = self.read(size)
            if not data:
                logger.debug(f"{self!r}: end of stream")
                return
            yield data

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class StreamSampleSource(BaseSampleSource):
    """
    Samples from an already open binary stream (default: stdin).

    The stream is not closed by close(); its owner keeps it.

    Args:
        stream: Binary file object
    """

    def __init__(self, stream: Optional[BinaryIO] = None):
        super().__init__()
        self.stream = stream if stream is not None else sys.stdin.buffer

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False

    def read(self, size: int) -> bytes:
        if not self.is_open:
            raise TransportError("Not open")
        try:
            # read1 returns whatever is buffered instead of waiting for a full chunk
            reader = getattr(self.stream, "read1", self.stream.read)
            return reader(size)
        except OSError as e:
            raise TransportError(f"Stream read failed: {e}") from e


class FileSampleSource(BaseSampleSource):
    """
    Samples from a raw capture file.

    Args:
        path: File path
    """

    def __init__(self, path: str):
        super().__init__()
        self.path = path
        self._file: Optional[BinaryIO] = None

    def open(self) -> None:
        try:
            self._file = open(self.path, "rb")
        except OSError as e:
            raise TransportError(f"Cannot open {self.path}: {e}") from e
        self._open = True
        logger.info(f"Opened capture file {self.path}")

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None
        self._open = False

    def read(self, size: int) -> bytes:
        if not self._file:
            raise TransportError("Not open")
        try:
            return self._file.read(size)
        except OSError as e:
            raise TransportError(f"File read failed: {e}") from e

    def __repr__(self) -> str:
        return f"FileSampleSource({self.path!r})"
