"""Keyboard and mouse input for the airplane and the chase camera.

Held keys become single-frame control impulses: every frame, each bound key
that is down sets the matching impulse on the airplane, which consumes it in
its next update. Dragging the mouse turns the chase camera.

Typical usage example:
    from flysim.core.input import InputManager

    input_manager = InputManager(airplane, camera)

    # In game loop
    input_manager.process_events(pygame.event.get())
    input_manager.update(dt)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import pygame  # pylint: disable=no-member

from flysim.core.logging_system import get_logger

logger = get_logger(__name__)


class InputAction(Enum):
    """Input actions that can be bound to keys."""

    # Flight controls
    ROLL_LEFT = "roll_left"
    ROLL_RIGHT = "roll_right"
    PITCH_UP = "pitch_up"
    PITCH_DOWN = "pitch_down"
    THROTTLE_INCREASE = "throttle_increase"
    THROTTLE_DECREASE = "throttle_decrease"

    # System controls
    QUIT = "quit"


@dataclass
class InputConfig:
    """Configuration for the input system.

    Attributes:
        keyboard_bindings: Map of pygame key constants to InputAction.
        mouse_sensitivity: Camera rotate() input per pixel of mouse motion.
    """

    keyboard_bindings: dict[int, InputAction] = field(default_factory=dict)
    mouse_sensitivity: float = 0.005

    def __post_init__(self) -> None:
        """Initialize default key bindings if not provided."""
        if not self.keyboard_bindings:
            self.keyboard_bindings = self._get_default_bindings()

    def _get_default_bindings(self) -> dict[int, InputAction]:
        """Get default keyboard bindings.

        Returns:
            Dictionary mapping pygame keys to input actions.
        """
        return {
            # Flight controls
            pygame.K_LEFT: InputAction.ROLL_LEFT,
            pygame.K_RIGHT: InputAction.ROLL_RIGHT,
            pygame.K_UP: InputAction.PITCH_DOWN,
            pygame.K_DOWN: InputAction.PITCH_UP,
            pygame.K_PAGEUP: InputAction.THROTTLE_INCREASE,
            pygame.K_PAGEDOWN: InputAction.THROTTLE_DECREASE,
            pygame.K_PLUS: InputAction.THROTTLE_INCREASE,
            pygame.K_EQUALS: InputAction.THROTTLE_INCREASE,  # unshifted "+" on US layouts
            pygame.K_MINUS: InputAction.THROTTLE_DECREASE,
            pygame.K_KP_PLUS: InputAction.THROTTLE_INCREASE,
            pygame.K_KP_MINUS: InputAction.THROTTLE_DECREASE,
            # System
            pygame.K_ESCAPE: InputAction.QUIT,
        }


class InputManager:
    """Turns pygame events into airplane impulses and camera rotation.

    Examples:
        >>> manager = InputManager(airplane, camera)
        >>> manager.process_events(pygame_events)
        >>> manager.update(dt)
        >>> if manager.quit_requested:
        ...     running = False
    """

    def __init__(self, airplane: Any, camera: Any, config: InputConfig | None = None) -> None:
        """Initialize input manager.

        Args:
            airplane: Receives roll(), elevate() and throttle() impulses.
            camera: Receives rotate() look-around input.
            config: Input configuration (uses defaults if None).
        """
        self.airplane = airplane
        self.camera = camera
        self.config = config if config is not None else InputConfig()

        # Key press state tracking
        self._keys_pressed: set[int] = set()

        # Mouse look
        self._dragging = False
        self._mouse_dx = 0.0
        self._mouse_dy = 0.0

        self.quit_requested = False

        logger.info(
            "Input manager initialized with %d key bindings", len(self.config.keyboard_bindings)
        )

    def process_events(self, events: list[Any]) -> None:
        """Process a batch of pygame events.

        Args:
            events: Events from pygame.event.get().
        """
        for event in events:
            if event.type == pygame.QUIT:
                self.quit_requested = True
            elif event.type == pygame.KEYDOWN:
                self._keys_pressed.add(event.key)
                if self.config.keyboard_bindings.get(event.key) == InputAction.QUIT:
                    self.quit_requested = True
            elif event.type == pygame.KEYUP:
                self._keys_pressed.discard(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                self._dragging = True
            elif event.type == pygame.MOUSEBUTTONUP:
                self._dragging = False
            elif event.type == pygame.MOUSEMOTION and self._dragging:
                dx, dy = event.rel
                self._mouse_dx += dx
                self._mouse_dy += dy

    def get_active_actions(self) -> set[InputAction]:
        """Actions whose keys are currently held."""
        bindings = self.config.keyboard_bindings
        return {bindings[key] for key in self._keys_pressed if key in bindings}

    def update(self, dt: float) -> None:  # pylint: disable=unused-argument
        """Send this frame's impulses and camera rotation.

        Opposite actions held together cancel out.

        Args:
            dt: Frame period in seconds.
        """
        actions = self.get_active_actions()

        roll = self._axis(actions, InputAction.ROLL_LEFT, InputAction.ROLL_RIGHT)
        if roll:
            self.airplane.roll(roll)

        elevator = self._axis(actions, InputAction.PITCH_UP, InputAction.PITCH_DOWN)
        if elevator:
            self.airplane.elevate(elevator)

        throttle = self._axis(
            actions, InputAction.THROTTLE_DECREASE, InputAction.THROTTLE_INCREASE
        )
        if throttle:
            self.airplane.throttle(throttle)

        if self._mouse_dx or self._mouse_dy:
            sensitivity = self.config.mouse_sensitivity
            self.camera.rotate(self._mouse_dx * sensitivity, self._mouse_dy * sensitivity)
            self._mouse_dx = 0.0
            self._mouse_dy = 0.0

    @staticmethod
    def _axis(actions: set[InputAction], negative: InputAction, positive: InputAction) -> int:
        return (positive in actions) - (negative in actions)
