"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ColorMode(str, Enum):
    TRUECOLOR = "TrueColor"
    ANSI256 = "Ansi256"


class EscapeState(str, Enum):
    IDLE = "Idle"
    START = "Start"
    CSI = "Csi"
    OSC = "Osc"
    OSC_ESC = "OscSawEscape"
    STRING = "StringTerminated"
    STRING_ESC = "StringTerminatedSawEscape"
    FE = "SingleCharFe"


@dataclass
class Phase:
    """Point on the unit circle for the current hue angle."""

    sin: float = 0.0
    cos: float = 1.0


@dataclass
class RenderState:
    """Rendering position carried across segments, lines and sources.

    ``offset`` seeds the hue of each new line and moves by one per newline.
    Within a line the hue walks by rotating ``phase``.
    """

    offset: float = 0.0
    escape: EscapeState = EscapeState.IDLE
    line_active: bool = False
    phase: Phase = field(default_factory=Phase)

    def end_line(self) -> None:
        self.line_active = False
