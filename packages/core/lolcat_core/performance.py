"""Run counters and process resource sampling for debug diagnostics."""

from __future__ import annotations

from dataclasses import dataclass

import psutil


@dataclass
class RunStats:
    sources: int = 0
    glyphs: int = 0
    frames: int = 0
    overruns: int = 0
    bytes_written: int = 0
    writes: int = 0


@dataclass(frozen=True)
class RunSummary:
    sources: int
    glyphs: int
    frames: int
    overruns: int
    bytes_written: int
    writes: int
    elapsed_s: float
    fps: float
    bytes_per_write: float
    cpu_percent: float
    rss_mb: float


class PerformanceController:
    def __init__(self) -> None:
        self._process = psutil.Process()
        # Prime non-blocking CPU measurement.
        self._process.cpu_percent(interval=None)

    def sample(self, stats: RunStats, elapsed_s: float) -> RunSummary:
        elapsed = max(elapsed_s, 1e-9)
        cpu = float(self._process.cpu_percent(interval=None))
        rss_mb = float(self._process.memory_info().rss) / (1024 * 1024)
        return RunSummary(
            sources=stats.sources,
            glyphs=stats.glyphs,
            frames=stats.frames,
            overruns=stats.overruns,
            bytes_written=stats.bytes_written,
            writes=stats.writes,
            elapsed_s=elapsed,
            fps=stats.frames / elapsed,
            bytes_per_write=(stats.bytes_written / stats.writes) if stats.writes else 0.0,
            cpu_percent=cpu,
            rss_mb=rss_mb,
        )
