import math
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "render"))

from lolcat_render.color import (
    PhaseRotor,
    channel,
    color_sequence,
    phase_at,
    reset_sequence,
    rgb_from_phase,
    rgb_to_ansi256,
)
from lolcat_render.models import ColorMode, Phase


def direct_rgb(angle):
    return tuple(channel(math.sin(angle + k * 2.0 * math.pi / 3.0)) for k in range(3))


class Ansi256Tests(unittest.TestCase):
    def test_primary_colors(self):
        self.assertEqual(rgb_to_ansi256(255, 0, 0), 196)
        self.assertEqual(rgb_to_ansi256(0, 255, 0), 46)
        self.assertEqual(rgb_to_ansi256(0, 0, 255), 21)

    def test_grayscale_ramp(self):
        self.assertEqual(rgb_to_ansi256(128, 128, 128), 243)
        self.assertEqual(rgb_to_ansi256(0, 0, 0), 16)
        self.assertEqual(rgb_to_ansi256(255, 255, 255), 231)
        for level in range(256):
            idx = rgb_to_ansi256(level, level, level)
            self.assertTrue(idx in (16, 231) or 232 <= idx <= 255, (level, idx))


class RainbowTests(unittest.TestCase):
    def test_channel_clamps_and_rounds(self):
        self.assertEqual(channel(0.0), 128)
        self.assertEqual(channel(1.0), 255)
        self.assertEqual(channel(-1.0), 1)
        self.assertEqual(channel(5.0), 255)
        self.assertEqual(channel(-5.0), 0)

    def test_phase_at_origin(self):
        self.assertEqual(rgb_from_phase(phase_at(0.0)), (128, 238, 18))

    def test_phase_matches_direct_sine(self):
        for angle in (0.0, 0.3, 1.7, 4.2, -2.5):
            for a, b in zip(rgb_from_phase(phase_at(angle)), direct_rgb(angle)):
                self.assertLessEqual(abs(a - b), 1)

    def test_rotor_tracks_direct_evaluation(self):
        freq, spread, offset = 0.1, 3.0, 17.0
        phase = phase_at(freq * offset)
        rotor = PhaseRotor(freq / spread)
        for step in range(500):
            expected = direct_rgb(freq * (offset + step / spread))
            actual = rgb_from_phase(phase)
            for a, b in zip(actual, expected):
                self.assertLessEqual(abs(a - b), 1)
            rotor.advance(phase)

    def test_non_finite_values_give_zero_channels(self):
        self.assertEqual(channel(math.nan), 0)
        self.assertEqual(channel(math.inf), 0)
        self.assertEqual(rgb_from_phase(phase_at(math.inf)), (0, 0, 0))
        self.assertEqual(rgb_from_phase(phase_at(math.nan)), (0, 0, 0))
        self.assertEqual(rgb_from_phase(phase_at(1e308 * 200.0)), (0, 0, 0))

    def test_rotor_with_non_finite_delta(self):
        phase = Phase()
        PhaseRotor(math.inf).advance(phase)
        self.assertEqual(rgb_from_phase(phase), (0, 0, 0))
        self.assertEqual(rgb_to_ansi256(*rgb_from_phase(phase)), 16)

    def test_huge_finite_angle(self):
        for value in rgb_from_phase(phase_at(1e300)):
            self.assertTrue(0 <= value <= 255)

class SequenceTests(unittest.TestCase):
    def test_truecolor_foreground(self):
        self.assertEqual(color_sequence((1, 2, 3), ColorMode.TRUECOLOR), "\x1b[38;2;1;2;3m")

    def test_ansi256_background(self):
        self.assertEqual(color_sequence((255, 0, 0), ColorMode.ANSI256, invert=True), "\x1b[48;5;196m")

    def test_reset_layer(self):
        self.assertEqual(reset_sequence(False), "\x1b[39m")
        self.assertEqual(reset_sequence(True), "\x1b[49m")


if __name__ == "__main__":
    unittest.main()
