"""Settings for Fly.

This package provides the tunable gameplay constants and display settings,
loaded from YAML.
"""

from flysim.settings.flight_settings import (
    CameraTuning,
    DisplaySettings,
    FlightTuning,
    SimulatorSettings,
    load_settings,
)

__all__ = [
    "CameraTuning",
    "DisplaySettings",
    "FlightTuning",
    "SimulatorSettings",
    "load_settings",
]
