"""Flight model for the arcade airplane."""

from flysim.physics.flight_model.airplane import Airplane
from flysim.physics.flight_model.base import FlightForces

__all__ = ["Airplane", "FlightForces"]
