"""Shared types for the flight model.

Typical usage example:
    from flysim.physics.flight_model.base import FlightForces, check_impulse

    forces = FlightForces()
    forces.calculate_total()
"""

from dataclasses import dataclass, field

import numpy as np

# Allowed values of a control impulse: one frame of left/none/right input
IMPULSE_VALUES = (-1, 0, 1)


def _zero() -> np.ndarray:
    return np.zeros(3)


@dataclass
class FlightForces:
    """Forces acting on the airplane during the last update.

    All vectors are in world space. Kept for the heads-up display and for
    debugging; the integrator does not read them back.

    Attributes:
        thrust: Thrust along the nose.
        drag: Quadratic drag opposing the velocity.
        gravity: Constant downward pull.
        lift: Vertical lift plus the centripetal force of a banked turn.
        total: Sum of the above.
    """

    thrust: np.ndarray = field(default_factory=_zero)
    drag: np.ndarray = field(default_factory=_zero)
    gravity: np.ndarray = field(default_factory=_zero)
    lift: np.ndarray = field(default_factory=_zero)
    total: np.ndarray = field(default_factory=_zero)

    def calculate_total(self) -> np.ndarray:
        """Update and return the total force."""
        self.total = self.thrust + self.drag + self.gravity + self.lift
        return self.total


def check_impulse(name: str, value: float) -> int:
    """Validate a control impulse.

    Args:
        name: Control name, used in the error message.
        value: Impulse value.

    Returns:
        The impulse as an int (-1, 0 or 1).

    Raises:
        ValueError: If the value is not -1, 0 or 1.
    """
    if value not in IMPULSE_VALUES:
        raise ValueError(f"{name} impulse must be -1, 0 or 1, got {value!r}")
    return int(value)
