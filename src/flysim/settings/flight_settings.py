"""Tunable gameplay settings.

The flight model and chase camera are driven by hand-tuned constants (thrust
and drag coefficients, control rates, turn radius, camera tracking speed).
They are grouped into dataclasses here and can be overridden from a YAML
file without touching the algorithms:

    flight:
      thrust_coefficient: 18.0
    camera:
      track_rate: 0.3
    display:
      width: 1280

Typical usage:
    from flysim.settings.flight_settings import load_settings

    settings = load_settings("my_tuning.yaml")
    airplane = Airplane(settings.flight)
"""

import math
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from flysim.core.logging_system import get_logger
from flysim.core.resource_path import get_config_path

logger = get_logger(__name__)

DEFAULT_SETTINGS_FILE = "flysim.yaml"


def _check(condition: bool, message: str) -> None:
    if not condition:
        raise ValueError(message)


def _filter_known(cls: type, section: str, data: dict[str, Any]) -> dict[str, Any]:
    """Keep the keys of ``data`` that are fields of ``cls``, warning about the rest."""
    if not isinstance(data, dict):
        raise ValueError(f"Section '{section}' must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown %s settings: %s", section, ", ".join(unknown))
    return {key: value for key, value in data.items() if key in known}


@dataclass
class FlightTuning:
    """Constants of the arcade flight model.

    Angles are in radians, rates in radians per second. Speeds are relative
    to ``reference_speed``; at reference speed in level flight thrust cancels
    drag and lift cancels gravity.

    Attributes:
        roll_rate: Roll rate with full aileron.
        roll_level_rate: Scale of the automatic wings-leveling roll.
        pitch_rate: Pitch rate with full elevator (wings level).
        pitch_level_rate: Scale of the automatic nose-leveling pitch.
        min_rotation: Rotations smaller than this (radians) are skipped.
        throttle_rate: Change of speed per second of throttle input.
        min_speed: Lowest commanded speed.
        max_speed: Highest commanded speed.
        initial_speed: Commanded speed at spawn.
        thrust_coefficient: Thrust at reference speed.
        drag_coefficient: Quadratic drag at reference speed.
        reference_speed: Speed at which the coefficients are expressed.
        gravity: Downward acceleration.
        lift_coefficient: Lift at reference speed.
        turn_radius_coefficient: Turn radius at a bank with sine 1.
        min_bank_sine: Banks with a smaller sine do not turn the airplane.
        initial_position: Spawn position (x, y, z), z up.
        initial_velocity: Spawn velocity per unit of ``initial_speed``.
    """

    roll_rate: float = math.pi / 3.0
    roll_level_rate: float = math.pi / 6.0
    pitch_rate: float = math.pi / 4.0
    pitch_level_rate: float = math.pi / 4.0
    min_rotation: float = 1e-5
    throttle_rate: float = 0.5
    min_speed: float = 0.0
    max_speed: float = 3.0
    initial_speed: float = 1.0
    thrust_coefficient: float = 15.0
    drag_coefficient: float = 15.0
    reference_speed: float = 1.0
    gravity: float = 6.0
    lift_coefficient: float = 6.0
    turn_radius_coefficient: float = 3.8
    min_bank_sine: float = 0.1
    initial_position: tuple[float, float, float] = (0.0, 0.0, 1.2)
    initial_velocity: tuple[float, float, float] = (1.0, 1.0, 1.0)

    def __post_init__(self) -> None:
        """Validate values.

        Raises:
            ValueError: If a value is out of range.
        """
        for name in ("roll_rate", "roll_level_rate", "pitch_rate", "pitch_level_rate"):
            _check(getattr(self, name) >= 0.0, f"{name} must be non-negative")
        _check(self.min_rotation >= 0.0, "min_rotation must be non-negative")
        _check(self.throttle_rate > 0.0, "throttle_rate must be positive")
        _check(
            0.0 <= self.min_speed <= self.max_speed,
            f"Expected 0 <= min_speed <= max_speed, got {self.min_speed}, {self.max_speed}",
        )
        _check(
            self.min_speed <= self.initial_speed <= self.max_speed,
            f"initial_speed {self.initial_speed} outside [{self.min_speed}, {self.max_speed}]",
        )
        for name in ("thrust_coefficient", "drag_coefficient", "gravity", "lift_coefficient"):
            _check(getattr(self, name) >= 0.0, f"{name} must be non-negative")
        _check(self.reference_speed > 0.0, "reference_speed must be positive")
        _check(self.turn_radius_coefficient > 0.0, "turn_radius_coefficient must be positive")
        _check(0.0 < self.min_bank_sine <= 1.0, "min_bank_sine must be in (0, 1]")

        for name in ("initial_position", "initial_velocity"):
            vector = tuple(float(c) for c in getattr(self, name))
            _check(len(vector) == 3, f"{name} must have 3 components")
            setattr(self, name, vector)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FlightTuning":
        """Create from a dictionary, ignoring unknown keys."""
        return cls(**_filter_known(cls, "flight", data))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for YAML serialization."""
        result = asdict(self)
        result["initial_position"] = list(self.initial_position)
        result["initial_velocity"] = list(self.initial_velocity)
        return result


@dataclass
class CameraTuning:
    """Constants of the chase camera.

    Attributes:
        rotate_step: Look-around angle per unit of rotate() input.
        track_rate: Maximum distance the view direction moves per second.
        stationary_threshold: Deviation below which the camera counts as settled.
        retrack_delay: Seconds to wait before following a new deviation.
        eye_distance: Distance of the eye behind the airplane.
        eye_lift: Height of the eye per unit of (1 - direction.z).
        follow_roll: Copy the airplane's up vector every frame (banks the view).
    """

    rotate_step: float = math.pi / 6.0
    track_rate: float = 0.2
    stationary_threshold: float = 1e-4
    retrack_delay: float = 0.5
    eye_distance: float = 0.2
    eye_lift: float = 0.06
    follow_roll: bool = False

    def __post_init__(self) -> None:
        """Validate values.

        Raises:
            ValueError: If a value is out of range.
        """
        _check(self.rotate_step > 0.0, "rotate_step must be positive")
        _check(self.track_rate > 0.0, "track_rate must be positive")
        _check(self.stationary_threshold > 0.0, "stationary_threshold must be positive")
        _check(self.retrack_delay >= 0.0, "retrack_delay must be non-negative")
        _check(self.eye_distance >= 0.0, "eye_distance must be non-negative")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CameraTuning":
        """Create from a dictionary, ignoring unknown keys."""
        return cls(**_filter_known(cls, "camera", data))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for YAML serialization."""
        return asdict(self)


@dataclass
class DisplaySettings:
    """Window and projection settings.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        fullscreen: Use the desktop resolution in fullscreen mode.
        wireframe: Draw the airplane as outlines only.
        fov_degrees: Vertical field of view.
        near: Near clip distance.
        far: Far clip distance.
        frame_rate: Simulation steps per second.
        mouse_sensitivity: Look-around input per pixel of mouse motion.
    """

    width: int = 1024
    height: int = 720
    fullscreen: bool = False
    wireframe: bool = False
    fov_degrees: float = 45.0
    near: float = 0.05
    far: float = 50.0
    frame_rate: int = 60
    mouse_sensitivity: float = 0.005

    def __post_init__(self) -> None:
        """Validate values.

        Raises:
            ValueError: If a value is out of range.
        """
        _check(self.width > 0 and self.height > 0, "Window size must be positive")
        _check(0.0 < self.fov_degrees < 180.0, "fov_degrees must be in (0, 180)")
        _check(0.0 < self.near < self.far, "Expected 0 < near < far")
        _check(self.frame_rate > 0, "frame_rate must be positive")
        _check(self.mouse_sensitivity >= 0.0, "mouse_sensitivity must be non-negative")

    @property
    def aspect(self) -> float:
        """Width over height."""
        return self.width / self.height

    @property
    def frame_period(self) -> float:
        """Seconds per simulation step."""
        return 1.0 / self.frame_rate

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DisplaySettings":
        """Create from a dictionary, ignoring unknown keys."""
        return cls(**_filter_known(cls, "display", data))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for YAML serialization."""
        return asdict(self)


@dataclass
class SimulatorSettings:
    """All settings of a simulator run."""

    flight: FlightTuning = field(default_factory=FlightTuning)
    camera: CameraTuning = field(default_factory=CameraTuning)
    display: DisplaySettings = field(default_factory=DisplaySettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SimulatorSettings":
        """Create from a dictionary with ``flight``, ``camera`` and ``display`` sections."""
        data = _filter_known(cls, "top-level", data)
        return cls(
            flight=FlightTuning.from_dict(data.get("flight") or {}),
            camera=CameraTuning.from_dict(data.get("camera") or {}),
            display=DisplaySettings.from_dict(data.get("display") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for YAML serialization."""
        return {
            "flight": self.flight.to_dict(),
            "camera": self.camera.to_dict(),
            "display": self.display.to_dict(),
        }


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Invalid settings file {path}: top level must be a mapping")
    return data


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge ``overrides`` into ``base`` one section deep."""
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def load_settings(config_path: str | Path | None = None) -> SimulatorSettings:
    """Load settings from the bundled defaults and an optional override file.

    Args:
        config_path: YAML file whose values override the bundled flysim.yaml.

    Returns:
        Validated settings.

    Raises:
        FileNotFoundError: If ``config_path`` is given but does not exist.
        ValueError: If a file is malformed or a value is out of range.
    """
    data: dict[str, Any] = {}

    default_path = get_config_path(DEFAULT_SETTINGS_FILE)
    if default_path.exists():
        data = _read_yaml(default_path)
    else:
        logger.warning("Default settings %s not found, using built-in values", default_path)

    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")
        data = _merge(data, _read_yaml(path))
        logger.info("Loaded settings overrides from %s", path)

    return SimulatorSettings.from_dict(data)
