"""Printer: owns rendering state for a whole run and drives each source through it."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import BinaryIO

from lolcat_render import RESET, ColorMode, EscapeState, RenderState, SegmentRenderer
from lolcat_stream import (
    DEFAULT_CAPACITY,
    READ_CHUNK_SIZE,
    BrokenPipe,
    OutputBuffer,
    Utf8StreamDecoder,
    normalize_io_errors,
)

from .animation import HIDE_CURSOR, RESTORE_CURSOR, SAVE_CURSOR, SHOW_CURSOR, AnimationLoop
from .config import ColorizerConfig
from .logging_setup import get_logger
from .performance import RunStats


def random_seed_offset(span: float) -> float:
    return float(time.time_ns() % int(span))


def initial_offset(seed: int) -> float:
    if seed == 0:
        return random_seed_offset(256.0)
    return float(seed % 256)


class Printer:
    """Colorizes sources in order, keeping the rainbow continuous between them.

    ``render`` raises ``BrokenPipe`` when the downstream reader has gone away
    and ``StreamIOError`` for any other read or write failure. ``finalize``
    must run once at the end of every run to show the cursor again and reset
    color attributes.
    """

    def __init__(
        self,
        config: ColorizerConfig,
        sink: BinaryIO,
        use_color: bool,
        color_mode: ColorMode = ColorMode.ANSI256,
        offset: float = 0.0,
        buffer_size: int = DEFAULT_CAPACITY,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.use_color = use_color
        self.color_mode = color_mode
        self.state = RenderState(offset=offset)
        self.out = OutputBuffer(sink, capacity=buffer_size)
        self.renderer = SegmentRenderer(config.spread, config.freq, invert=config.invert, color_mode=color_mode)
        self.animation = AnimationLoop(config.duration, config.speed, clock=clock, sleep=sleep)
        self.cursor_hidden = False
        self.broken = False
        self.stats = RunStats()
        self._line: list[str] = []
        self._log = get_logger()

    @property
    def offset(self) -> float:
        return self.state.offset

    def render(self, source: BinaryIO) -> None:
        self.stats.sources += 1
        try:
            if self.use_color:
                self._render_colored(source)
            else:
                self._copy(source)
        except BrokenPipe:
            self._mark_broken()
            raise
        finally:
            self._sync_stats()

    def print_text(self, text: str) -> None:
        try:
            self._write_text(text)
            self._end_source()
        except BrokenPipe:
            self._mark_broken()
            raise
        finally:
            self._sync_stats()

    def finalize(self) -> None:
        if self.broken:
            return
        try:
            if self.cursor_hidden:
                self.out.push(SHOW_CURSOR.encode("ascii"))
                self.cursor_hidden = False
            if self.use_color:
                self.out.push(RESET.encode("ascii"))
            self.out.flush()
        except BrokenPipe:
            self._mark_broken()
            raise
        finally:
            self._sync_stats()

    def _copy(self, source: BinaryIO) -> None:
        with normalize_io_errors():
            while True:
                chunk = source.read1(READ_CHUNK_SIZE)
                if not chunk:
                    break
                self.out.push(chunk)
                self.out.flush()

    def _render_colored(self, source: BinaryIO) -> None:
        decoder = Utf8StreamDecoder()
        with normalize_io_errors():
            while True:
                segments = decoder.read_from(source)
                if segments is None:
                    break
                for segment in segments:
                    self._write_text(segment)
                self.out.flush()
            for segment in decoder.finish():
                self._write_text(segment)
        self._end_source()

    def _write_text(self, text: str) -> None:
        if not self.config.animate:
            self.renderer.render(text, self.state, self.out)
            return

        start = 0
        while True:
            newline = text.find("\n", start)
            if newline < 0:
                if start < len(text):
                    self._line.append(text[start:])
                return
            self._line.append(text[start:newline])
            line = "".join(self._line)
            self._line.clear()
            self._print_line(line, had_newline=True)
            start = newline + 1

    def _end_source(self) -> None:
        if self._line:
            line = "".join(self._line)
            self._line.clear()
            self._print_line(line, had_newline=False)
        self.state.end_line()
        self.state.escape = EscapeState.IDLE
        self.out.flush()

    def _print_line(self, text: str, had_newline: bool) -> None:
        if text:
            self._animate_line(text, had_newline)
        elif had_newline:
            self.renderer.newline(self.state, self.out)

    def _animate_line(self, text: str, had_newline: bool) -> None:
        out = self.out
        state = self.state
        if not self.cursor_hidden:
            out.push(HIDE_CURSOR.encode("ascii"))
            self.cursor_hidden = True
        out.push(SAVE_CURSOR.encode("ascii"))

        original = state.offset
        escape_at_start = state.escape

        def draw(_index: int) -> None:
            out.push(RESTORE_CURSOR.encode("ascii"))
            state.offset += self.config.spread
            state.end_line()
            state.escape = escape_at_start
            self.renderer.render(text, state, out)
            out.flush()

        try:
            self.animation.run(draw)
        except BrokenPipe:
            self._log.debug(f"downstream closed the pipe during animation frame {self.animation.frame_index}")
            raise
        state.offset = original
        state.end_line()
        if had_newline:
            self.renderer.newline(state, out)

    def _mark_broken(self) -> None:
        if not self.broken:
            self._log.debug("downstream closed the pipe; stopping output")
        self.broken = True
        self.out.discard()

    def _sync_stats(self) -> None:
        self.stats.glyphs = self.renderer.glyphs
        self.stats.frames = self.animation.frames_drawn
        self.stats.overruns = self.animation.overruns
        self.stats.bytes_written = self.out.bytes_written
        self.stats.writes = self.out.writes
