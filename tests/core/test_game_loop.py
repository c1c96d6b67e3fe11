"""Tests for the fixed-step frame clock."""

import pytest

from flysim.core.game_loop import FrameClock


class TestFrameClock:
    """Test FrameClock step counting."""

    @pytest.fixture
    def clock(self) -> FrameClock:
        """Create a clock with a 0.1 s period starting at t=0."""
        return FrameClock(0.1, start_time=0.0)

    def test_no_steps_before_first_period(self, clock: FrameClock) -> None:
        """Test nothing is due before a full period has passed."""
        assert clock.advance(0.05) == 0
        assert clock.advance(0.1) == 0

    def test_counts_elapsed_periods(self, clock: FrameClock) -> None:
        """Test several periods are due after a slow frame."""
        assert clock.advance(0.35) == 3
        assert clock.frame_count == 3

    def test_remainder_carries_over(self, clock: FrameClock) -> None:
        """Test partial periods are not lost between calls."""
        assert clock.advance(0.15) == 1
        assert clock.advance(0.25) == 1

    def test_steps_are_capped(self) -> None:
        """Test a long stall is not replayed in full."""
        clock = FrameClock(0.1, max_steps=4, start_time=0.0)
        assert clock.advance(5.0) == 4
        assert clock.frame_count == 4

    def test_long_stall_is_counted_at_once(self) -> None:
        """Test a very long stall yields the cap and leaves no backlog."""
        clock = FrameClock(1.0 / 60.0, start_time=0.0)
        assert clock.advance(1e9) == 10
        assert clock.advance(1e9 + 0.001) <= 1

    def test_no_steps_without_focus(self, clock: FrameClock) -> None:
        """Test an unfocused window does not advance."""
        clock.lose_focus()
        assert not clock.focused
        assert clock.advance(1.0) == 0

    def test_focus_regain_resynchronizes(self, clock: FrameClock) -> None:
        """Test time spent unfocused is skipped."""
        clock.lose_focus()
        clock.gain_focus(10.0)
        assert clock.advance(10.25) == 2

    @pytest.mark.parametrize(("period", "max_steps"), [(0.0, 10), (-1.0, 10), (0.1, 0)])
    def test_invalid_arguments(self, period: float, max_steps: int) -> None:
        """Test non-positive period or step cap raise ValueError."""
        with pytest.raises(ValueError):
            FrameClock(period, max_steps=max_steps)
