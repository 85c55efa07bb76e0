"""Run configuration plus user defaults loaded from a JSON settings file."""

from __future__ import annotations

import json
import math
import os
import platform
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from lolcat_render import ColorMode

CONFIG_VERSION = 1
MIN_SPREAD = 0.1
MIN_SPEED = 0.1
MIN_DURATION = 0.1


class ConfigError(ValueError):
    """Invalid option value; reported to the user as ``lolcat: <message>``."""


@dataclass(frozen=True)
class ColorizerConfig:
    spread: float = 3.0
    freq: float = 0.1
    seed: int = 0
    animate: bool = False
    duration: int = 12
    speed: float = 20.0
    invert: bool = False
    truecolor: bool = False
    force: bool = False
    debug: bool = False

    def validate(self) -> ColorizerConfig:
        if not self.spread >= MIN_SPREAD:
            raise ConfigError("--spread must be >= 0.1")
        if not math.isfinite(self.freq):
            raise ConfigError("--freq must be a finite number")
        if not self.speed >= MIN_SPEED:
            raise ConfigError("--speed must be >= 0.1")
        if self.duration < 1:
            raise ConfigError("--duration must be >= 1")
        if self.seed < 0:
            raise ConfigError("--seed must be >= 0")
        return self


@dataclass
class RainbowDefaults:
    spread: float = 3.0
    freq: float = 0.1
    seed: int = 0


@dataclass
class AnimationDefaults:
    duration: float = 12.0
    speed: float = 20.0


@dataclass
class OutputDefaults:
    truecolor: bool = False
    invert: bool = False
    buffer_size: int = 8192


@dataclass
class LoggingDefaults:
    file_enabled: bool = False
    keep_log_files: int = 7


@dataclass
class UserConfig:
    config_version: int = CONFIG_VERSION
    rainbow: RainbowDefaults = field(default_factory=RainbowDefaults)
    animation: AnimationDefaults = field(default_factory=AnimationDefaults)
    output: OutputDefaults = field(default_factory=OutputDefaults)
    logging: LoggingDefaults = field(default_factory=LoggingDefaults)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "lolcat"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "lolcat"
    return Path.home() / ".config" / "lolcat"


def config_path() -> Path:
    override = os.environ.get("LOLCAT_CONFIG")
    if override:
        return Path(override).expanduser()
    return config_root() / "config.json"


def _merge(dataclass_type, raw: Any):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _as_float(value: Any, fallback: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


def _normalize_rainbow(cfg: UserConfig) -> None:
    base = RainbowDefaults()
    cfg.rainbow.spread = max(MIN_SPREAD, _as_float(cfg.rainbow.spread, base.spread))
    cfg.rainbow.freq = _as_float(cfg.rainbow.freq, base.freq)
    cfg.rainbow.seed = max(0, int(_as_float(cfg.rainbow.seed, base.seed)))


def _normalize_animation(cfg: UserConfig) -> None:
    base = AnimationDefaults()
    cfg.animation.duration = max(MIN_DURATION, _as_float(cfg.animation.duration, base.duration))
    cfg.animation.speed = max(MIN_SPEED, _as_float(cfg.animation.speed, base.speed))


def _normalize_output(cfg: UserConfig) -> None:
    cfg.output.truecolor = bool(cfg.output.truecolor)
    cfg.output.invert = bool(cfg.output.invert)
    size = int(_as_float(cfg.output.buffer_size, OutputDefaults().buffer_size))
    cfg.output.buffer_size = max(256, min(1024 * 1024, size))


def _normalize_logging(cfg: UserConfig) -> None:
    cfg.logging.file_enabled = bool(cfg.logging.file_enabled)
    cfg.logging.keep_log_files = max(2, int(_as_float(cfg.logging.keep_log_files, 7)))


def load_config(path: Path | None = None) -> UserConfig:
    path = path or config_path()
    if not path.exists():
        return UserConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return UserConfig()
    if not isinstance(raw, dict):
        return UserConfig()

    cfg = UserConfig(
        config_version=int(_as_float(raw.get("config_version", CONFIG_VERSION), CONFIG_VERSION)),
        rainbow=_merge(RainbowDefaults, raw.get("rainbow", {})),
        animation=_merge(AnimationDefaults, raw.get("animation", {})),
        output=_merge(OutputDefaults, raw.get("output", {})),
        logging=_merge(LoggingDefaults, raw.get("logging", {})),
    )

    _normalize_rainbow(cfg)
    _normalize_animation(cfg)
    _normalize_output(cfg)
    _normalize_logging(cfg)
    return cfg


def duration_to_frames(value: float) -> int:
    if not math.isfinite(value) or value < MIN_DURATION:
        raise ConfigError("--duration must be >= 0.1")
    return max(1, int(value + 0.5))


def detects_truecolor(term: str | None) -> bool:
    if not term:
        return False
    lower = term.lower()
    return "truecolor" in lower or "24bit" in lower


def choose_color_mode(config: ColorizerConfig, env: Mapping[str, str] | None = None) -> ColorMode:
    env = os.environ if env is None else env
    if config.truecolor or detects_truecolor(env.get("COLORTERM")):
        return ColorMode.TRUECOLOR
    return ColorMode.ANSI256
