"""Arcade flight model with self-stabilizing attitude and coordinated turns.

The airplane's attitude is an accumulated rotation matrix whose first three
columns are the body axes forward, left and up (z is world up). Every frame:

1. throttle impulses change the commanded speed,
2. aileron and elevator impulses roll and pitch the airplane; without input
   it rolls and pitches itself back toward level flight,
3. thrust, quadratic drag, gravity and vertical lift are summed,
4. a banked airplane gets a centripetal force and yaws into the turn
   (there is no rudder),
5. velocity and position are integrated with explicit Euler.

Typical usage example:
    from flysim.physics.flight_model.airplane import Airplane

    airplane = Airplane()
    airplane.roll(-1)
    airplane.update(dt=1 / 60)
    print(airplane.get_position())
"""

import math

import numpy as np

from flysim.core.logging_system import get_logger
from flysim.physics.flight_model.base import FlightForces, check_impulse
from flysim.physics.vectors import (
    WORLD_UP,
    length,
    normalize,
    rotate,
    sign,
    translate,
    vec3,
)
from flysim.rendering.base import IRenderable
from flysim.settings.flight_settings import FlightTuning

logger = get_logger(__name__)

# Body axes
ROLL_AXIS = vec3(1.0, 0.0, 0.0)
PITCH_AXIS = vec3(0.0, 1.0, 0.0)

# Seconds of simulated time between debug state dumps
DEBUG_LOG_INTERVAL = 1.0


class Airplane:
    """Player airplane: kinematic state, control impulses and the integrator.

    Control impulses (aileron, elevator, throttle) are single-frame inputs in
    {-1, 0, +1}. The input collaborator sets them with :meth:`roll`,
    :meth:`elevate` and :meth:`throttle`; :meth:`update` consumes and clears
    them.

    ``speed`` is the throttle-commanded reference speed, not the magnitude of
    ``velocity``: the airplane may climb, sink or slip.

    Examples:
        >>> airplane = Airplane()
        >>> airplane.throttle(1)
        >>> airplane.update(1 / 60)
        >>> round(airplane.speed, 4)
        1.0083
    """

    def __init__(
        self, tuning: FlightTuning | None = None, model: IRenderable | None = None
    ) -> None:
        """Create the airplane in level flight at its spawn position.

        Args:
            tuning: Flight model constants (defaults if None).
            model: Visual representation receiving the transform each update.
        """
        self.tuning = tuning if tuning is not None else FlightTuning()
        self.model = model

        # Kinematic state
        self.position = np.array(self.tuning.initial_position, dtype=float)
        self.rotation_matrix = np.identity(4)
        self.forward = vec3(1.0, 0.0, 0.0)
        self.left = vec3(0.0, 1.0, 0.0)
        self.up = vec3(0.0, 0.0, 1.0)
        self.speed = self.tuning.initial_speed
        self.velocity = np.array(self.tuning.initial_velocity, dtype=float) * self.speed
        self.translation_matrix = translate(self.position)

        # Pass-through render state
        self.projection_matrix = np.identity(4)
        self.view_matrix = np.identity(4)

        # Control impulses, cleared by update()
        self.aileron = 0
        self.elevator = 0
        self.throttle_command = 0

        # Last computed forces (for display)
        self.forces = FlightForces()

        self._updates = 0
        self._time_since_log = 0.0

        if self.model is not None:
            self.model.set_transform(self.get_transform())

        logger.info(
            "Airplane initialized at (%.2f, %.2f, %.2f), speed=%.2f",
            self.position[0],
            self.position[1],
            self.position[2],
            self.speed,
        )

    # Control impulses

    def roll(self, value: int) -> None:
        """Set the aileron impulse for the next update (-1 left, +1 right)."""
        self.aileron = check_impulse("aileron", value)

    def elevate(self, value: int) -> None:
        """Set the elevator impulse for the next update (-1 nose up, +1 nose down)."""
        self.elevator = check_impulse("elevator", value)

    def throttle(self, value: int) -> None:
        """Set the throttle impulse for the next update (-1 slower, +1 faster)."""
        self.throttle_command = check_impulse("throttle", value)

    # Simulation

    def update(self, dt: float) -> None:
        """Advance the airplane by one physics step.

        Args:
            dt: Time step in seconds (must be positive).
        """
        t = self.tuning
        self._updates += 1

        # Throttle
        if self.throttle_command:
            self.speed += t.throttle_rate * self.throttle_command * dt
            self.speed = min(max(t.min_speed, self.speed), t.max_speed)
        self.throttle_command = 0

        # Roll: pilot input, or level the wings
        if self.aileron:
            d_roll = t.roll_rate * self.aileron * dt
        else:
            d_roll = (
                sign(self.up[2])
                * -sign(self.left[2])
                * math.sqrt(abs(self.left[2]))
                * t.roll_level_rate
                * dt
            )
        if abs(d_roll) > t.min_rotation:
            self.rotation_matrix = rotate(self.rotation_matrix, d_roll, ROLL_AXIS)

        # Pitch: pilot input (less authority when banked), or level the nose
        if self.elevator:
            d_pitch = t.pitch_rate * (1.0 - self.left[2] ** 4) * self.elevator * dt
        else:
            d_pitch = (
                sign(self.up[2])
                * sign(self.forward[2])
                * math.sqrt(abs(self.forward[2]))
                * t.pitch_level_rate
                * dt
            )
        if abs(d_pitch) > t.min_rotation:
            self.rotation_matrix = rotate(self.rotation_matrix, d_pitch, PITCH_AXIS)

        self._update_axes()

        self._calculate_forces()
        self._coordinate_turn(dt)

        # Integrate
        acceleration = self.forces.calculate_total()
        self.velocity = self.velocity + acceleration * dt
        self.position = self.position + self.velocity * dt
        self.translation_matrix = translate(self.position)

        if self.model is not None:
            self.model.set_transform(self.get_transform())

        self.aileron = 0
        self.elevator = 0

        self._time_since_log += dt
        if self._time_since_log >= DEBUG_LOG_INTERVAL:
            self._time_since_log = 0.0
            logger.debug(
                "[AIRPLANE] frame=%d pos=(%.2f, %.2f, %.2f) |v|=%.3f speed=%.2f "
                "bank=%.1f° pitch=%.1f°",
                self._updates,
                self.position[0],
                self.position[1],
                self.position[2],
                length(self.velocity),
                self.speed,
                self.get_bank_degrees(),
                self.get_pitch_degrees(),
            )

    def _update_axes(self) -> None:
        """Normalize the rotation matrix columns and read the body axes back."""
        for column in range(3):
            self.rotation_matrix[:3, column] = normalize(self.rotation_matrix[:3, column])
        self.forward = self.rotation_matrix[:3, 0].copy()
        self.left = self.rotation_matrix[:3, 1].copy()
        self.up = self.rotation_matrix[:3, 2].copy()

    def _calculate_forces(self) -> None:
        """Compute thrust, drag, gravity and vertical lift into ``self.forces``."""
        t = self.tuning
        v = self.velocity
        reference_sq = t.reference_speed * t.reference_speed

        self.forces.thrust = self.forward * t.thrust_coefficient * self.speed / t.reference_speed
        self.forces.drag = -normalize(v) * (t.drag_coefficient / reference_sq) * np.dot(v, v)
        self.forces.gravity = vec3(0.0, 0.0, -t.gravity)

        # Only the vertical part of lift; the horizontal part comes from the turn
        forward_speed = np.dot(self.forward, v)
        lift = self.up * (t.lift_coefficient / reference_sq) * forward_speed * forward_speed
        self.forces.lift = vec3(0.0, 0.0, lift[2])

    def _coordinate_turn(self, dt: float) -> None:
        """Add the centripetal force of a bank and yaw the airplane into the turn."""
        t = self.tuning
        v = self.velocity

        cos_bank = float(np.dot(self.up, WORLD_UP))
        sine = math.sqrt(max(0.0, 1.0 - cos_bank * cos_bank))
        if sine < t.min_bank_sine:
            return

        radius = t.turn_radius_coefficient / sine
        horizontal_up = vec3(self.up[0], self.up[1], 0.0)
        centripetal = normalize(horizontal_up) * np.dot(v, v) / radius
        self.forces.lift = self.forces.lift + centripetal

        turn_sign = sign(np.cross(v, centripetal)[2])
        if turn_sign == 0.0:
            return

        # World vertical in body space; the rotation is orthonormal so its inverse is the transpose
        axis = self.rotation_matrix[:3, :3].T @ vec3(0.0, 0.0, turn_sign)
        self.rotation_matrix = rotate(self.rotation_matrix, length(v) / radius * dt, axis)
        self._update_axes()

    def set_orientation(self, rotation_matrix: np.ndarray) -> None:
        """Replace the attitude (e.g., to spawn banked or climbing).

        Args:
            rotation_matrix: 4x4 (or 3x3) rotation; its columns become
                forward, left and up after normalization.

        Raises:
            ValueError: If the matrix has the wrong shape.
        """
        matrix = np.asarray(rotation_matrix, dtype=float)
        if matrix.shape not in ((3, 3), (4, 4)):
            raise ValueError(f"Expected a 3x3 or 4x4 rotation, got shape {matrix.shape}")

        self.rotation_matrix = np.identity(4)
        self.rotation_matrix[:3, :3] = matrix[:3, :3]
        self._update_axes()
        if self.model is not None:
            self.model.set_transform(self.get_transform())

    # Collaborator interface

    def get_position(self) -> np.ndarray:
        """Current world position."""
        return self.position.copy()

    def get_forward_direction(self) -> np.ndarray:
        """Unit vector along the nose."""
        return self.forward.copy()

    def get_up_direction(self) -> np.ndarray:
        """Unit vector out of the cockpit roof."""
        return self.up.copy()

    def get_transform(self) -> np.ndarray:
        """Model transform: translation composed with rotation."""
        return self.translation_matrix @ self.rotation_matrix

    def set_projection(self, projection: np.ndarray) -> None:
        """Store the projection matrix and hand it to the visual model."""
        self.projection_matrix = np.array(projection, dtype=float)
        if self.model is not None:
            self.model.set_projection(self.projection_matrix)

    def set_view(self, view: np.ndarray) -> None:
        """Store the view matrix and hand it to the visual model."""
        self.view_matrix = np.array(view, dtype=float)
        if self.model is not None:
            self.model.set_view(self.view_matrix)

    # Readouts

    def get_update_count(self) -> int:
        """Number of update() calls so far."""
        return self._updates

    def get_airspeed(self) -> float:
        """Magnitude of the velocity."""
        return length(self.velocity)

    def get_heading_degrees(self) -> float:
        """Heading of the nose in the horizontal plane, counterclockwise from +x."""
        return math.degrees(math.atan2(self.forward[1], self.forward[0])) % 360.0

    def get_pitch_degrees(self) -> float:
        """Nose-up angle above the horizon."""
        return math.degrees(math.asin(max(-1.0, min(1.0, self.forward[2]))))

    def get_bank_degrees(self) -> float:
        """Bank angle; positive when the left wing is high (banked right)."""
        return math.degrees(math.asin(max(-1.0, min(1.0, self.left[2]))))
