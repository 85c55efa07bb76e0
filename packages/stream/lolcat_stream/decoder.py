"""Incremental UTF-8 decoding over arbitrary byte chunk boundaries."""

from __future__ import annotations

from typing import BinaryIO

REPLACEMENT = "\ufffd"
MAX_SEQUENCE_LEN = 4
READ_CHUNK_SIZE = 8192

_TRUNCATED = "unexpected end of data"


def decode_utf8(data: bytes, final: bool = False) -> tuple[list[str], int]:
    """Split ``data`` into text segments and replacement markers.

    Returns the segments and the number of bytes consumed. Bytes past that
    point form an incomplete but potentially valid sequence at the end of the
    buffer and belong to the next call. With ``final`` set nothing is left
    over: a truncated tail becomes one replacement marker.
    """
    segments: list[str] = []
    pos = 0
    size = len(data)
    while pos < size:
        try:
            segments.append(data[pos:].decode("utf-8"))
            return segments, size
        except UnicodeDecodeError as exc:
            bad_start = pos + exc.start
            bad_end = pos + exc.end
            if bad_start > pos:
                segments.append(data[pos:bad_start].decode("utf-8"))
            if exc.reason == _TRUNCATED and bad_end == size:
                if not final:
                    return segments, bad_start
                segments.append(REPLACEMENT)
                return segments, size
            segments.append(REPLACEMENT)
            pos = bad_end
    return segments, size


class Utf8StreamDecoder:
    """Decodes a byte stream chunk by chunk, carrying split code points over.

    The working buffer holds the carry-over bytes followed by one read chunk,
    so it is sized for ``MAX_SEQUENCE_LEN + chunk_size`` and never grows.
    """

    def __init__(self, chunk_size: int = READ_CHUNK_SIZE) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self._buf = bytearray(MAX_SEQUENCE_LEN + chunk_size)
        self._carry_len = 0

    @property
    def carry(self) -> bytes:
        return bytes(self._buf[: self._carry_len])

    @property
    def pending(self) -> bool:
        return self._carry_len > 0

    def read_from(self, source: BinaryIO) -> list[str] | None:
        """Read one chunk from ``source`` and decode it.

        Returns ``None`` once the source is exhausted.
        """
        start = self._carry_len
        with memoryview(self._buf) as view:
            window = view[start : start + self.chunk_size]
            try:
                count = source.readinto1(window)
            finally:
                window.release()
        if not count:
            return None
        return self._decode_window(start + count)

    def feed(self, chunk: bytes) -> list[str]:
        segments: list[str] = []
        for offset in range(0, len(chunk), self.chunk_size):
            piece = chunk[offset : offset + self.chunk_size]
            end = self._carry_len + len(piece)
            self._buf[self._carry_len : end] = piece
            segments.extend(self._decode_window(end))
        return segments

    def finish(self) -> list[str]:
        """Resolve leftover carry bytes at end of stream."""
        if not self._carry_len:
            return []
        self._carry_len = 0
        return [REPLACEMENT]

    def _decode_window(self, end: int) -> list[str]:
        data = bytes(self._buf[:end])
        segments, consumed = decode_utf8(data)
        tail = data[consumed:]
        self._buf[: len(tail)] = tail
        self._carry_len = len(tail)
        return segments
