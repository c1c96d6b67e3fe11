"""Chase camera that follows the airplane's heading with a lag.

The camera sits on the airplane's position and looks along its own
``direction``, which only slowly follows the airplane's nose. A small
deadband and a grace timer keep it from twitching on every tiny change:

- Stationary: the direction matches the nose. A deviation of at least
  ``stationary_threshold`` arms the grace timer.
- Pending: the timer counts down; the direction does not move.
- Tracking: the direction moves toward the nose at ``track_rate`` units per
  second until it is within the threshold again.

The view matrix is cached and only rebuilt by :meth:`ChaseCamera.get_view`
when something changed.

Typical usage example:
    from flysim.camera.chase_camera import ChaseCamera

    camera = ChaseCamera.following(airplane)
    camera.update_view(dt)
    if camera.view_changed():
        view = camera.get_view()
"""

import math
from typing import Protocol

import numpy as np

from flysim.core.logging_system import get_logger
from flysim.physics.vectors import WORLD_UP, length, look_at, normalize, vec3
from flysim.settings.flight_settings import CameraTuning

logger = get_logger(__name__)

# Steepest look-around angle above or below the horizontal
MAX_ELEVATION = math.radians(89.0)


class Trackable(Protocol):
    """What the camera needs from the object it follows."""

    def get_position(self) -> np.ndarray: ...

    def get_forward_direction(self) -> np.ndarray: ...

    def get_up_direction(self) -> np.ndarray: ...


def step_toward(current: np.ndarray, target: np.ndarray, max_step: float) -> np.ndarray:
    """Move a unit vector toward a unit target, staying on the unit sphere.

    The distance to the target shrinks by ``max_step`` (or to zero when it
    is already shorter). The result lies on the great circle through both
    vectors.

    Args:
        current: Unit vector to move.
        target: Unit vector to move toward.
        max_step: Largest decrease of ``|target - current|``.

    Returns:
        New unit vector.
    """
    remaining = length(target - current)
    if remaining < max_step:
        return target.copy()

    # Component of current perpendicular to target
    perpendicular = normalize(current - np.dot(current, target) * target)
    if not perpendicular.any():
        # Opposite vectors: every great circle leads to the target, pick one
        perpendicular = normalize(np.cross(target, WORLD_UP))
        if not perpendicular.any():
            perpendicular = normalize(np.cross(target, vec3(1.0, 0.0, 0.0)))

    chord = remaining - max_step
    angle = 2.0 * math.asin(min(1.0, chord / 2.0))
    return normalize(math.cos(angle) * target + math.sin(angle) * perpendicular)


class ChaseCamera:
    """Camera tracking an airplane with hysteresis and a lazily built view.

    Attributes:
        position: Point looked at; copied from the airplane every update.
        direction: Unit view direction, lagging behind the airplane's nose.
        up: View up vector.
        timer: Seconds left before tracking may resume.
        stationary: Whether the direction has settled on the nose.

    Examples:
        >>> camera = ChaseCamera(position, forward, up, airplane)
        >>> camera.rotate(1.0, 0.0)  # look right
        >>> view = camera.get_view()
    """

    def __init__(
        self,
        position: np.ndarray,
        direction: np.ndarray,
        up: np.ndarray,
        airplane: Trackable,
        tuning: CameraTuning | None = None,
    ) -> None:
        """Create the camera.

        Args:
            position: Initial position.
            direction: Initial view direction (normalized here).
            up: View up vector.
            airplane: Object to follow.
            tuning: Camera constants (defaults if None).
        """
        self.tuning = tuning if tuning is not None else CameraTuning()
        self.airplane = airplane

        self.position = np.array(position, dtype=float)
        self.direction = normalize(direction)
        self.up = np.array(up, dtype=float)
        self.timer = 0.0
        self.stationary = True

        self._view_changed = True
        self._view = look_at(self.position, self.position + self.direction, self.up)

        logger.info("Chase camera initialized")

    @classmethod
    def following(cls, airplane: Trackable, tuning: CameraTuning | None = None) -> "ChaseCamera":
        """Create a camera on the airplane, looking along its nose."""
        return cls(
            airplane.get_position(),
            airplane.get_forward_direction(),
            airplane.get_up_direction(),
            airplane,
            tuning,
        )

    def view_changed(self) -> bool:
        """Whether the cached view is stale. Does not clear the flag."""
        return self._view_changed

    def get_view(self) -> np.ndarray:
        """Return the view matrix, rebuilding it only if it is stale."""
        if self._view_changed:
            t = self.tuning
            eye = (
                self.position
                - normalize(self.direction) * t.eye_distance
                + vec3(0.0, 0.0, 1.0 - self.direction[2]) * t.eye_lift
            )
            self._view = look_at(eye, self.position, self.up)
            self._view_changed = False
        return self._view

    def rotate(self, x: float, y: float) -> None:
        """Turn the view direction by player input.

        Args:
            x: Horizontal input; positive turns right.
            y: Vertical input; positive turns down.
        """
        step = self.tuning.rotate_step
        if y:
            theta = -y * step
            tilted = normalize(math.cos(theta) * self.direction + math.sin(theta) * self.up)
            self.direction = self._limit_elevation(tilted)
        if x:
            theta = x * step
            axis = normalize(np.cross(self.direction, self.up))
            self.direction = normalize(math.cos(theta) * self.direction + math.sin(theta) * axis)
        self._view_changed = True

    def _limit_elevation(self, direction: np.ndarray) -> np.ndarray:
        """Keep ``direction`` at most MAX_ELEVATION away from the horizontal.

        Looking straight along ``up`` leaves no axis for horizontal turns and
        no side vector for the view, so such directions are pulled back while
        keeping the current heading.
        """
        up = normalize(self.up)
        elevation = math.asin(max(-1.0, min(1.0, float(np.dot(direction, up)))))
        if abs(elevation) <= MAX_ELEVATION:
            return direction

        heading = normalize(self.direction - np.dot(self.direction, up) * up)
        if not heading.any():
            heading = normalize(direction - np.dot(direction, up) * up)
        if not heading.any():
            return self.direction

        limit = math.copysign(MAX_ELEVATION, elevation)
        return normalize(math.cos(limit) * heading + math.sin(limit) * up)

    def update_view(self, dt: float) -> None:
        """Follow the airplane for one frame.

        Args:
            dt: Time step in seconds.
        """
        t = self.tuning
        self.position = self.airplane.get_position()
        if t.follow_roll:
            self.up = self.airplane.get_up_direction()

        target = self.airplane.get_forward_direction()
        distance = length(target - self.direction)

        if self.timer > 0.0:
            self.timer = max(0.0, self.timer - dt)
        elif not self.stationary:
            self.direction = step_toward(self.direction, target, t.track_rate * dt)
            if length(target - self.direction) < t.stationary_threshold:
                self.stationary = True
                logger.debug("Camera settled")
        elif distance >= t.stationary_threshold:
            self.timer = t.retrack_delay
            self.stationary = False
            logger.debug("Camera deviation %.5f, tracking in %.2fs", distance, self.timer)

        self._view_changed = True
