"""Core services: run configuration, logging, animation pacing, and the printer."""

from .animation import AnimationLoop, AnimationState
from .config import (
    ColorizerConfig,
    ConfigError,
    UserConfig,
    choose_color_mode,
    detects_truecolor,
    duration_to_frames,
    load_config,
)
from .performance import PerformanceController, RunStats, RunSummary
from .printer import Printer, initial_offset, random_seed_offset

__all__ = [
    "AnimationLoop",
    "AnimationState",
    "ColorizerConfig",
    "ConfigError",
    "PerformanceController",
    "Printer",
    "RunStats",
    "RunSummary",
    "UserConfig",
    "choose_color_mode",
    "detects_truecolor",
    "duration_to_frames",
    "initial_offset",
    "load_config",
    "random_seed_offset",
]
