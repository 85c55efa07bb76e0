"""Rainbow color generation, escape scanning, and segment rendering."""

from .color import (
    RESET,
    RESET_BG,
    RESET_FG,
    PhaseRotor,
    color_sequence,
    phase_at,
    reset_sequence,
    rgb_from_phase,
    rgb_to_ansi256,
)
from .escape import advance
from .models import ColorMode, EscapeState, Phase, RenderState
from .segment import TAB_WIDTH, SegmentRenderer

__all__ = [
    "ColorMode",
    "EscapeState",
    "Phase",
    "PhaseRotor",
    "RESET",
    "RESET_BG",
    "RESET_FG",
    "RenderState",
    "SegmentRenderer",
    "TAB_WIDTH",
    "advance",
    "color_sequence",
    "phase_at",
    "reset_sequence",
    "rgb_from_phase",
    "rgb_to_ansi256",
]
