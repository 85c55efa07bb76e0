import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "render"))
sys.path.insert(0, str(ROOT / "packages" / "stream"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from lolcat_core.animation import AnimationLoop, AnimationState


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class AnimationLoopTests(unittest.TestCase):
    def test_draws_each_frame_and_sleeps_remaining(self):
        clock = FakeClock()
        loop = AnimationLoop(4, 10.0, clock=clock, sleep=clock.sleep)
        seen = []

        def draw(index):
            self.assertIs(loop.state, AnimationState.RUNNING)
            seen.append(index)
            clock.now += 0.02

        self.assertEqual(loop.run(draw), 4)
        self.assertEqual(seen, [0, 1, 2, 3])
        self.assertEqual(len(clock.sleeps), 4)
        for seconds in clock.sleeps:
            self.assertAlmostEqual(seconds, 0.08)
        self.assertAlmostEqual(clock.now, 100.4)
        self.assertIs(loop.state, AnimationState.IDLE)

    def test_overrun_skips_sleep_and_rebases(self):
        clock = FakeClock()
        loop = AnimationLoop(3, 10.0, clock=clock, sleep=clock.sleep)

        def draw(index):
            clock.now += 0.5 if index == 0 else 0.01

        loop.run(draw)
        self.assertEqual(loop.overruns, 1)
        self.assertEqual(len(clock.sleeps), 2)
        for seconds in clock.sleeps:
            self.assertAlmostEqual(seconds, 0.09)

    def test_state_reset_when_draw_fails(self):
        clock = FakeClock()
        loop = AnimationLoop(2, 10.0, clock=clock, sleep=clock.sleep)

        def draw(index):
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            loop.run(draw)
        self.assertIs(loop.state, AnimationState.IDLE)

    def test_rejects_bad_parameters(self):
        with self.assertRaises(ValueError):
            AnimationLoop(0, 10.0)
        with self.assertRaises(ValueError):
            AnimationLoop(1, 0.0)


if __name__ == "__main__":
    unittest.main()
