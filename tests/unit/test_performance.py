import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "render"))
sys.path.insert(0, str(ROOT / "packages" / "stream"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from lolcat_core.performance import PerformanceController, RunStats


class PerformanceTests(unittest.TestCase):
    def test_summary_shape(self):
        ctl = PerformanceController()
        summary = ctl.sample(RunStats(sources=2, glyphs=40, frames=10, overruns=1, bytes_written=100, writes=4), 2.0)
        self.assertEqual(summary.sources, 2)
        self.assertEqual(summary.overruns, 1)
        self.assertAlmostEqual(summary.fps, 5.0)
        self.assertAlmostEqual(summary.bytes_per_write, 25.0)
        self.assertGreaterEqual(summary.cpu_percent, 0.0)
        self.assertGreater(summary.rss_mb, 0.0)

    def test_zero_writes_and_elapsed(self):
        summary = PerformanceController().sample(RunStats(), 0.0)
        self.assertEqual(summary.bytes_per_write, 0.0)
        self.assertEqual(summary.fps, 0.0)


if __name__ == "__main__":
    unittest.main()
