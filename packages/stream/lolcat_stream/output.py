"""Fixed-capacity coalescing buffer in front of the output sink."""

from __future__ import annotations

from typing import BinaryIO

from .errors import normalize_io_errors

DEFAULT_CAPACITY = 8192


class OutputBuffer:
    """Batches small writes (color codes, glyphs, resets) into one sink write.

    Bytes are never dropped or reordered: a push that does not fit flushes the
    pending bytes first, and a push larger than the whole capacity is written
    straight through after that flush.
    """

    def __init__(self, sink: BinaryIO, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.sink = sink
        self.capacity = capacity
        self._buf = bytearray(capacity)
        self._len = 0
        self.bytes_written = 0
        self.writes = 0

    def __len__(self) -> int:
        return self._len

    @property
    def pending(self) -> bytes:
        return bytes(self._buf[: self._len])

    def push(self, data: bytes) -> None:
        size = len(data)
        if size > self.capacity - self._len:
            self.drain()
            if size > self.capacity:
                self._write(data)
                return
        end = self._len + size
        self._buf[self._len : end] = data
        self._len = end

    def drain(self) -> None:
        """Write pending bytes to the sink without flushing the sink itself."""
        if not self._len:
            return
        data = self._buf[: self._len]
        self._len = 0
        self._write(data)

    def flush(self) -> None:
        self.drain()
        with normalize_io_errors():
            self.sink.flush()

    def discard(self) -> None:
        self._len = 0

    def _write(self, data: bytes | bytearray) -> None:
        with normalize_io_errors():
            self.sink.write(data)
        self.writes += 1
        self.bytes_written += len(data)
