"""IO error taxonomy shared by the decoder, output buffer, and printer."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


class StreamError(Exception):
    """Base class for failures surfaced while streaming a source to the sink."""


class BrokenPipe(StreamError):
    """Downstream reader closed the pipe. Not a failure: the run stops quietly."""


class StreamIOError(StreamError):
    """Read or write failure other than a broken pipe."""

    def __init__(self, message: str, errno: int | None = None) -> None:
        super().__init__(message)
        self.errno = errno


def classify(exc: OSError) -> StreamError:
    if isinstance(exc, BrokenPipeError):
        return BrokenPipe(str(exc) or "broken pipe")
    return StreamIOError(exc.strerror or str(exc), errno=exc.errno)


@contextmanager
def normalize_io_errors() -> Iterator[None]:
    try:
        yield
    except StreamError:
        raise
    except OSError as exc:
        raise classify(exc) from exc
