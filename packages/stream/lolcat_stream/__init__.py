"""Byte-level streaming: incremental UTF-8 decoding and buffered sink output."""

from .decoder import MAX_SEQUENCE_LEN, READ_CHUNK_SIZE, REPLACEMENT, Utf8StreamDecoder, decode_utf8
from .errors import BrokenPipe, StreamError, StreamIOError, normalize_io_errors
from .output import DEFAULT_CAPACITY, OutputBuffer

__all__ = [
    "BrokenPipe",
    "DEFAULT_CAPACITY",
    "MAX_SEQUENCE_LEN",
    "OutputBuffer",
    "READ_CHUNK_SIZE",
    "REPLACEMENT",
    "StreamError",
    "StreamIOError",
    "Utf8StreamDecoder",
    "decode_utf8",
    "normalize_io_errors",
]
