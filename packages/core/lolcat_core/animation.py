"""Frame loop that redraws one line in place at a fixed rate."""

from __future__ import annotations

import time
from collections.abc import Callable
from enum import Enum

SAVE_CURSOR = "\x1b7"
RESTORE_CURSOR = "\x1b8"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


class AnimationState(str, Enum):
    IDLE = "Idle"
    RUNNING = "Running"


class AnimationLoop:
    """Calls ``draw`` once per frame, pacing frames against absolute deadlines.

    Each deadline is the previous one plus ``1 / frame_rate``, so render time
    does not accumulate into drift. A frame that overruns its deadline skips
    the sleep and re-bases the schedule on the current time instead of
    queueing the missed frames.
    """

    def __init__(
        self,
        frames: int,
        frame_rate: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if frames < 1:
            raise ValueError("frames must be >= 1")
        if frame_rate <= 0:
            raise ValueError("frame_rate must be positive")
        self.frames = frames
        self.frame_rate = frame_rate
        self.interval = 1.0 / frame_rate
        self._clock = clock
        self._sleep = sleep
        self.state = AnimationState.IDLE
        self.frame_index = 0
        self.frames_drawn = 0
        self.overruns = 0

    def run(self, draw: Callable[[int], None]) -> int:
        self.state = AnimationState.RUNNING
        deadline = self._clock()
        drawn = 0
        try:
            for index in range(self.frames):
                self.frame_index = index
                draw(index)
                drawn += 1
                self.frames_drawn += 1
                deadline += self.interval
                remaining = deadline - self._clock()
                if remaining > 0:
                    self._sleep(remaining)
                else:
                    self.overruns += 1
                    deadline = self._clock()
        finally:
            self.state = AnimationState.IDLE
        return drawn
