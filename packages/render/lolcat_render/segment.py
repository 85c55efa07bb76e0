"""Colorizes decoded text segments glyph by glyph."""

from __future__ import annotations

from typing import Protocol

from .color import PhaseRotor, color_sequence, phase_at, reset_sequence, rgb_from_phase, rgb_to_ansi256
from .escape import ESC, advance
from .models import ColorMode, EscapeState, RenderState

TAB_WIDTH = 8


class ByteSink(Protocol):
    def push(self, data: bytes) -> None: ...


class SegmentRenderer:
    """Walks text, passing escape sequences through and coloring everything else.

    Within a line the hue advances by rotating the phase ``freq / spread``
    per glyph. A new line re-derives its phase from ``freq * offset``, which
    gives the vertical gradient across lines.
    """

    def __init__(
        self,
        spread: float,
        freq: float,
        invert: bool = False,
        color_mode: ColorMode = ColorMode.ANSI256,
    ) -> None:
        if spread <= 0:
            raise ValueError("spread must be positive")
        self.spread = spread
        self.freq = freq
        self.invert = invert
        self.color_mode = color_mode
        self.glyphs = 0
        self._rotor = PhaseRotor(freq / spread)
        self._reset = reset_sequence(invert).encode("ascii")
        self._palette: dict[int, bytes] = {}

    def render(self, text: str, state: RenderState, out: ByteSink) -> None:
        for ch in text:
            if state.escape is not EscapeState.IDLE or ch == ESC:
                state.escape, inside = advance(state.escape, ch)
                if inside:
                    out.push(ch.encode("utf-8"))
                    continue
            if ch == "\n":
                self.newline(state, out)
            elif ch == "\t":
                for _ in range(TAB_WIDTH):
                    self._glyph(" ", state, out)
            else:
                self._glyph(ch, state, out)

    def newline(self, state: RenderState, out: ByteSink) -> None:
        out.push(b"\n")
        state.offset += 1.0
        state.end_line()

    def _glyph(self, ch: str, state: RenderState, out: ByteSink) -> None:
        if not state.line_active:
            state.phase = phase_at(self.freq * state.offset)
            state.line_active = True
        out.push(self._open(rgb_from_phase(state.phase)) + ch.encode("utf-8") + self._reset)
        self._rotor.advance(state.phase)
        self.glyphs += 1

    def _open(self, rgb: tuple[int, int, int]) -> bytes:
        if self.color_mode is ColorMode.TRUECOLOR:
            return color_sequence(rgb, self.color_mode, self.invert).encode("ascii")
        idx = rgb_to_ansi256(*rgb)
        cached = self._palette.get(idx)
        if cached is None:
            cached = color_sequence(rgb, self.color_mode, self.invert).encode("ascii")
            self._palette[idx] = cached
        return cached
