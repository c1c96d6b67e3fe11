"""Tests for the chase camera."""

import math

import numpy as np
import pytest

from flysim.camera.chase_camera import ChaseCamera, step_toward
from flysim.physics.vectors import normalize, transform_point, vec3
from flysim.settings.flight_settings import CameraTuning

DT = 1.0 / 60.0


class FakeAirplane:
    """Stand-in with a settable pose."""

    def __init__(self) -> None:
        self.position = vec3(0.0, 0.0, 1.0)
        self.forward = vec3(1.0, 0.0, 0.0)
        self.up = vec3(0.0, 0.0, 1.0)

    def get_position(self) -> np.ndarray:
        return self.position.copy()

    def get_forward_direction(self) -> np.ndarray:
        return self.forward.copy()

    def get_up_direction(self) -> np.ndarray:
        return self.up.copy()


@pytest.fixture
def airplane() -> FakeAirplane:
    """Create a fake airplane flying along +x."""
    return FakeAirplane()


@pytest.fixture
def camera(airplane: FakeAirplane) -> ChaseCamera:
    """Create a camera following the fake airplane."""
    return ChaseCamera.following(airplane)


class TestStepToward:
    """Test the great-circle step toward a target direction."""

    def test_reduces_distance_by_step(self) -> None:
        """Test the distance to the target shrinks by exactly the step."""
        current = vec3(0.0, 1.0, 0.0)
        target = vec3(1.0, 0.0, 0.0)
        result = step_toward(current, target, 0.1)

        assert np.linalg.norm(result) == pytest.approx(1.0)
        assert np.linalg.norm(target - result) == pytest.approx(math.sqrt(2.0) - 0.1)
        assert result[2] == pytest.approx(0.0)

    def test_snaps_when_close(self) -> None:
        """Test a step larger than the distance lands on the target."""
        target = vec3(1.0, 0.0, 0.0)
        result = step_toward(normalize(vec3(1.0, 0.01, 0.0)), target, 0.1)
        assert result.tolist() == target.tolist()

    def test_opposite_vectors_make_progress(self) -> None:
        """Test antipodal directions still move toward the target."""
        target = vec3(1.0, 0.0, 0.0)
        result = step_toward(-target, target, 0.1)

        assert np.linalg.norm(result) == pytest.approx(1.0)
        assert np.linalg.norm(target - result) == pytest.approx(1.9)

    def test_vertical_opposites_make_progress(self) -> None:
        """Test antipodal vertical directions have a fallback turn axis."""
        target = vec3(0.0, 0.0, 1.0)
        result = step_toward(-target, target, 0.1)
        assert np.linalg.norm(target - result) == pytest.approx(1.9)


class TestView:
    """Test view matrix construction and caching."""

    def test_following_starts_on_airplane(self, camera: ChaseCamera) -> None:
        """Test the camera starts at the airplane, looking along its nose."""
        assert camera.position.tolist() == [0.0, 0.0, 1.0]
        assert camera.direction.tolist() == [1.0, 0.0, 0.0]
        assert camera.stationary
        assert camera.timer == 0.0
        assert camera.view_changed()

    def test_eye_behind_and_above(self, camera: ChaseCamera) -> None:
        """Test the eye sits behind the airplane and slightly above it."""
        view = camera.get_view()
        eye = vec3(-0.2, 0.0, 1.06)

        assert transform_point(view, eye) == pytest.approx([0.0, 0.0, 0.0], abs=1e-12)
        # The airplane is straight ahead on -Z
        ahead = transform_point(view, camera.position)
        assert ahead[0] == pytest.approx(0.0, abs=1e-12)
        assert ahead[2] < 0.0

    def test_view_is_cached(self, camera: ChaseCamera) -> None:
        """Test get_view() rebuilds only when something changed."""
        first = camera.get_view()
        assert not camera.view_changed()
        assert camera.get_view() is first

        camera.rotate(0.1, 0.0)
        assert camera.view_changed()
        assert camera.get_view() is not first

    def test_view_changed_does_not_clear_flag(self, camera: ChaseCamera) -> None:
        """Test querying the flag leaves it set."""
        assert camera.view_changed()
        assert camera.view_changed()

    def test_update_marks_view_changed(self, camera: ChaseCamera) -> None:
        """Test every update invalidates the view."""
        camera.get_view()
        camera.update_view(DT)
        assert camera.view_changed()


class TestRotate:
    """Test player look-around."""

    def test_rotate_right(self, camera: ChaseCamera) -> None:
        """Test positive x turns the view right (toward -y)."""
        camera.rotate(1.0, 0.0)
        assert camera.direction == pytest.approx([math.cos(math.pi / 6.0), -0.5, 0.0])

    def test_rotate_down(self, camera: ChaseCamera) -> None:
        """Test positive y turns the view down."""
        camera.rotate(0.0, 1.0)
        assert camera.direction == pytest.approx([math.cos(math.pi / 6.0), 0.0, -0.5])

    def test_rotate_keeps_unit_length(self, camera: ChaseCamera) -> None:
        """Test combined input keeps the direction normalized."""
        camera.rotate(0.7, -0.3)
        assert np.linalg.norm(camera.direction) == pytest.approx(1.0)

    @pytest.mark.parametrize("y", [-3.0, 3.0])
    def test_steep_rotate_stops_short_of_vertical(self, camera: ChaseCamera, y: float) -> None:
        """Test a large vertical turn stops one degree short of straight up or down."""
        camera.rotate(0.0, y)

        elevation = math.degrees(math.asin(camera.direction[2]))
        assert abs(elevation) == pytest.approx(89.0)
        assert camera.direction[0] > 0.0
        assert math.copysign(1.0, elevation) == -math.copysign(1.0, y)

    def test_horizontal_turn_after_looking_up(self, camera: ChaseCamera) -> None:
        """Test horizontal input still turns the view after looking straight up."""
        camera.rotate(0.0, -3.0)
        camera.rotate(1.0, 0.0)

        assert camera.direction[1] < 0.0
        view = camera.get_view()
        assert np.isfinite(view).all()
        assert np.linalg.norm(view[:3, :3], axis=1) == pytest.approx([1.0, 1.0, 1.0])


class TestTracking:
    """Test the stationary, pending and tracking states."""

    def test_follows_position(self, camera: ChaseCamera, airplane: FakeAirplane) -> None:
        """Test the position is copied every update."""
        airplane.position = vec3(3.0, 4.0, 5.0)
        camera.update_view(DT)
        assert camera.position.tolist() == [3.0, 4.0, 5.0]

    def test_small_deviation_is_ignored(self, camera: ChaseCamera, airplane: FakeAirplane) -> None:
        """Test deviations inside the deadband keep the camera stationary."""
        airplane.forward = normalize(vec3(1.0, 5e-5, 0.0))
        camera.update_view(DT)

        assert camera.stationary
        assert camera.timer == 0.0
        assert camera.direction.tolist() == [1.0, 0.0, 0.0]

    def test_deviation_arms_timer(self, camera: ChaseCamera, airplane: FakeAirplane) -> None:
        """Test a deviation outside the deadband starts the grace period."""
        airplane.forward = normalize(vec3(1.0, 2e-4, 0.0))
        camera.update_view(DT)

        assert not camera.stationary
        assert camera.timer == 0.5
        assert camera.direction.tolist() == [1.0, 0.0, 0.0]

    def test_waits_before_tracking(self, camera: ChaseCamera, airplane: FakeAirplane) -> None:
        """Test the direction holds during the grace period, then moves."""
        airplane.forward = vec3(0.0, 1.0, 0.0)
        camera.update_view(0.25)  # arms the timer
        camera.update_view(0.25)
        camera.update_view(0.25)

        assert camera.timer == 0.0
        assert camera.direction.tolist() == [1.0, 0.0, 0.0]

        camera.update_view(0.25)
        distance = np.linalg.norm(airplane.forward - camera.direction)
        assert distance == pytest.approx(math.sqrt(2.0) - 0.05)

    def test_timer_never_negative(self, camera: ChaseCamera, airplane: FakeAirplane) -> None:
        """Test the timer clamps at zero with a large time step."""
        airplane.forward = vec3(0.0, 1.0, 0.0)
        camera.update_view(DT)
        camera.update_view(2.0)
        assert camera.timer == 0.0

    def test_converges_within_time(self, camera: ChaseCamera, airplane: FakeAirplane) -> None:
        """Test a unit deviation settles in about five seconds of tracking."""
        camera.direction = vec3(0.5, math.sqrt(3.0) / 2.0, 0.0)
        camera.update_view(DT)
        assert not camera.stationary

        while camera.timer > 0.0:
            camera.update_view(DT)

        previous = np.linalg.norm(airplane.forward - camera.direction)
        frames = 0
        while not camera.stationary:
            camera.update_view(DT)
            frames += 1
            distance = np.linalg.norm(airplane.forward - camera.direction)
            assert distance <= previous
            assert np.linalg.norm(camera.direction) == pytest.approx(1.0)
            previous = distance
            assert frames <= 301

        assert frames >= 299
        assert camera.direction == pytest.approx(airplane.forward)

    def test_retracks_after_settling(self, camera: ChaseCamera, airplane: FakeAirplane) -> None:
        """Test a new deviation after settling arms the timer again."""
        airplane.forward = normalize(vec3(1.0, 0.01, 0.0))
        for _ in range(120):
            camera.update_view(DT)
        assert camera.stationary

        airplane.forward = vec3(1.0, 0.0, 0.0)
        camera.update_view(DT)
        assert not camera.stationary
        assert camera.timer == 0.5


class TestUpVector:
    """Test how the view up vector is handled."""

    def test_up_captured_at_construction(
        self, camera: ChaseCamera, airplane: FakeAirplane
    ) -> None:
        """Test the default camera keeps its initial up vector."""
        airplane.up = normalize(vec3(0.0, -0.5, 1.0))
        camera.update_view(DT)
        assert camera.up.tolist() == [0.0, 0.0, 1.0]

    def test_follow_roll_mirrors_up(self, airplane: FakeAirplane) -> None:
        """Test follow_roll copies the airplane's up vector every update."""
        camera = ChaseCamera.following(airplane, CameraTuning(follow_roll=True))
        airplane.up = normalize(vec3(0.0, -0.5, 1.0))
        camera.update_view(DT)
        assert camera.up == pytest.approx(airplane.up)
