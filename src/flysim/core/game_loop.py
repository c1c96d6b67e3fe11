"""Fixed-step frame clock.

The simulation always advances in steps of one frame period, independent of
how fast the window loop spins. The clock tells the loop how many steps are
due; it catches up after a slow frame and resynchronizes after the window
regains focus, so paused time is never simulated.

Typical usage example:
    from flysim.core.game_loop import FrameClock

    clock = FrameClock(frame_period=1 / 60)
    while running:
        for _ in range(clock.advance(time.monotonic())):
            simulation.step(clock.frame_period)
"""

import math
import time

from flysim.core.logging_system import get_logger

logger = get_logger(__name__)


class FrameClock:
    """Counts the fixed simulation steps due since the last call.

    Attributes:
        frame_period: Seconds per step.
        max_steps: Most steps returned by one advance() (the rest is dropped).
        focused: Whether the window has focus; no steps are due without it.
    """

    def __init__(
        self, frame_period: float, max_steps: int = 10, start_time: float | None = None
    ) -> None:
        """Initialize the clock.

        Args:
            frame_period: Seconds per step.
            max_steps: Upper bound on steps per advance().
            start_time: Reference time (defaults to time.monotonic()).

        Raises:
            ValueError: If frame_period or max_steps is not positive.
        """
        if frame_period <= 0.0:
            raise ValueError(f"frame_period must be positive, got {frame_period}")
        if max_steps <= 0:
            raise ValueError(f"max_steps must be positive, got {max_steps}")

        self.frame_period = frame_period
        self.max_steps = max_steps
        self.focused = True
        self._previous = time.monotonic() if start_time is None else start_time
        self._frames = 0

    @property
    def frame_count(self) -> int:
        """Total steps handed out."""
        return self._frames

    def advance(self, now: float) -> int:
        """Return the number of steps due at ``now`` and consume them.

        Args:
            now: Current time in seconds (same clock as start_time).

        Returns:
            Number of simulation steps to run.
        """
        if not self.focused:
            return 0

        # Whole periods strictly elapsed: a period that ends exactly at now is not due yet
        elapsed = now - self._previous
        steps = max(0, math.ceil(elapsed / self.frame_period) - 1)
        self._previous += steps * self.frame_period

        if steps > self.max_steps:
            logger.debug("Dropping %d late frames", steps - self.max_steps)
            steps = self.max_steps

        self._frames += steps
        return steps

    def lose_focus(self) -> None:
        """Stop handing out steps until focus returns."""
        self.focused = False

    def gain_focus(self, now: float) -> None:
        """Resume from ``now``, skipping the time spent unfocused."""
        self.focused = True
        self._previous = now
