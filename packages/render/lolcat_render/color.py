"""Sinusoidal rainbow generator and terminal color code helpers."""

from __future__ import annotations

import math

from .models import ColorMode, Phase

RESET = "\x1b[0m"
RESET_FG = "\x1b[39m"
RESET_BG = "\x1b[49m"

_SIN_120 = math.sin(2.0 * math.pi / 3.0)
_COS_120 = math.cos(2.0 * math.pi / 3.0)
_SIN_240 = math.sin(4.0 * math.pi / 3.0)
_COS_240 = math.cos(4.0 * math.pi / 3.0)


def channel(value: float) -> int:
    """Scale a sine value in [-1, 1] to a 0..255 channel, rounding half up.

    A non-finite value maps to 0.
    """
    if not math.isfinite(value):
        return 0
    scaled = math.floor(value * 127.0 + 128.0 + 0.5)
    return int(min(255.0, max(0.0, scaled)))


def _sin_cos(angle: float) -> tuple[float, float]:
    # Angles overflowed to inf or nan have no defined hue; the channels come out as 0.
    if not math.isfinite(angle):
        return math.nan, math.nan
    return math.sin(angle), math.cos(angle)


def phase_at(angle: float) -> Phase:
    s, c = _sin_cos(angle)
    return Phase(sin=s, cos=c)


def rgb_from_phase(phase: Phase) -> tuple[int, int, int]:
    """Channels at 0, 120 and 240 degrees via the angle-addition formulas."""
    s, c = phase.sin, phase.cos
    return (
        channel(s),
        channel(s * _COS_120 + c * _SIN_120),
        channel(s * _COS_240 + c * _SIN_240),
    )


class PhaseRotor:
    """Advances a phase by a fixed angle with a precomputed rotation.

    Pure rotation keeps the point on the unit circle up to floating-point
    drift; the drift is tolerated and lines re-seed their phase anyway.
    """

    def __init__(self, delta: float) -> None:
        self.delta = delta
        self._sin, self._cos = _sin_cos(delta)

    def advance(self, phase: Phase) -> None:
        s, c = phase.sin, phase.cos
        phase.sin = s * self._cos + c * self._sin
        phase.cos = c * self._cos - s * self._sin


def rgb_to_ansi256(r: int, g: int, b: int) -> int:
    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return (r - 8) * 24 // 247 + 232
    return 16 + 36 * (r * 5 // 255) + 6 * (g * 5 // 255) + (b * 5 // 255)


def color_sequence(rgb: tuple[int, int, int], mode: ColorMode, invert: bool = False) -> str:
    """Opening SGR sequence for a foreground (or background when inverted) color."""
    layer = 48 if invert else 38
    r, g, b = rgb
    if mode is ColorMode.TRUECOLOR:
        return f"\x1b[{layer};2;{r};{g};{b}m"
    return f"\x1b[{layer};5;{rgb_to_ansi256(r, g, b)}m"


def reset_sequence(invert: bool = False) -> str:
    return RESET_BG if invert else RESET_FG
