"""Fly - arcade flight simulator.

Main entry point for the application. Loads settings, opens the pygame
window, builds the simulation and runs the main loop.

Typical usage:
    uv run python -m flysim.main
    uv run python -m flysim.main --width 1280 --height 800 --wireframe
    uv run python -m flysim.main --config my_tuning.yaml --log-level DEBUG
"""

import argparse
import math
import sys
import time
from pathlib import Path

import pygame

from flysim.core.game_loop import FrameClock
from flysim.core.input import InputConfig, InputManager
from flysim.core.logging_system import get_logger, initialize_logging
from flysim.core.simulation import Simulation
from flysim.physics.vectors import perspective
from flysim.rendering.hud import FlightDisplay
from flysim.rendering.wireframe import AirplaneWireframe, GroundGrid
from flysim.settings.flight_settings import DisplaySettings, SimulatorSettings, load_settings
from flysim.version import get_about_info, get_version

logger = get_logger(__name__)

SKY_COLOR = (110, 160, 215)


class FlySim:
    """Main application class.

    Manages initialization, the main loop and shutdown.
    """

    def __init__(self, settings: SimulatorSettings, max_frames: int | None = None) -> None:
        """Initialize the application.

        Args:
            settings: Validated simulator settings.
            max_frames: Stop after this many simulated frames (None runs until quit).
        """
        self.settings = settings
        self.max_frames = max_frames
        display = settings.display

        # Initialize Pygame
        pygame.init()
        pygame.display.set_caption("Fly - a flight simulator")

        # Create window
        if display.fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
            pygame.mouse.set_visible(False)
        else:
            self.screen = pygame.display.set_mode(
                (display.width, display.height), pygame.RESIZABLE
            )
        logger.info("Window created: %dx%d", *self.screen.get_size())

        self.running = True

        # Scene
        self.airplane_model = AirplaneWireframe(wireframe=display.wireframe)
        self.ground = GroundGrid()
        self.simulation = Simulation.create(settings, model=self.airplane_model)
        self.simulation.add_renderable(self.ground)
        self._update_projection()

        # Input
        self.input_manager = InputManager(
            self.simulation.airplane,
            self.simulation.camera,
            InputConfig(mouse_sensitivity=display.mouse_sensitivity),
        )
        self.simulation.input_handler = self.input_manager.update

        self.display = FlightDisplay(self.simulation.airplane, self.simulation.camera)
        self.clock = FrameClock(display.frame_period)

    def _update_projection(self) -> None:
        """Rebuild the projection matrix for the current window size."""
        width, height = self.screen.get_size()
        display = self.settings.display
        projection = perspective(
            math.radians(display.fov_degrees), width / max(1, height), display.near, display.far
        )
        self.simulation.set_projection(projection)

    def run(self) -> None:
        """Run the main loop."""
        logger.info("Starting main loop")

        frame_period = self.clock.frame_period
        while self.running:
            self._process_events()

            for _ in range(self.clock.advance(time.monotonic())):
                self.simulation.step(frame_period)
                self.ground.set_center(self.simulation.airplane.get_position())
                if self.max_frames is not None and self.simulation.frame_count >= self.max_frames:
                    self.running = False
                    break

            self._render()
            pygame.display.flip()
            time.sleep(frame_period)

        self._shutdown()

    def _process_events(self) -> None:
        """Handle window events and pass the rest to the input manager."""
        events = pygame.event.get()
        for event in events:
            if event.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self._update_projection()
                logger.debug("Window resized to %dx%d", event.w, event.h)
            elif event.type == pygame.WINDOWFOCUSLOST:
                self.clock.lose_focus()
            elif event.type == pygame.WINDOWFOCUSGAINED:
                self.clock.gain_focus(time.monotonic())

        self.input_manager.process_events(events)
        if self.input_manager.quit_requested:
            self.running = False

    def _render(self) -> None:
        """Render the current frame."""
        self.screen.fill(SKY_COLOR)
        self.ground.draw(self.screen)
        self.airplane_model.draw(self.screen)
        self.display.draw(self.screen)

    def _shutdown(self) -> None:
        """Shutdown all systems."""
        logger.info("Shutting down after %d frames", self.simulation.frame_count)
        pygame.quit()
        logger.info("Shutdown complete")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse (defaults to sys.argv).

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="Fly - an arcade flight simulator")

    parser.add_argument("-w", "--width", type=int, help="Window width in pixels")
    parser.add_argument("-H", "--height", type=int, help="Window height in pixels")
    parser.add_argument(
        "-f", "--fullscreen", action="store_true", help="Use the desktop resolution fullscreen"
    )
    parser.add_argument(
        "--wireframe", action="store_true", help="Draw the airplane as outlines only"
    )
    parser.add_argument(
        "--config", type=Path, help="YAML file overriding the default tuning and display settings"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )
    parser.add_argument(
        "--frames", type=int, help="Quit after this many simulated frames (for smoke runs)"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")

    return parser.parse_args(argv)


def apply_overrides(settings: SimulatorSettings, args: argparse.Namespace) -> SimulatorSettings:
    """Apply command line options on top of the loaded settings.

    Returns:
        New settings; validation runs again on the changed section.

    Raises:
        ValueError: If an option value is invalid.
    """
    display = settings.display.to_dict()
    if args.width is not None:
        display["width"] = args.width
    if args.height is not None:
        display["height"] = args.height
    if args.fullscreen:
        display["fullscreen"] = True
    if args.wireframe:
        display["wireframe"] = True

    return SimulatorSettings(
        flight=settings.flight,
        camera=settings.camera,
        display=DisplaySettings.from_dict(display),
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    args = parse_args(argv)

    try:
        initialize_logging(level=args.log_level)
        about = get_about_info()
        logger.info("%s %s starting up...", about["name"], about["version"])
        settings = apply_overrides(load_settings(args.config), args)
    except (OSError, ValueError) as e:
        logger.error("Configuration error: %s", e)
        return 2

    if args.frames is not None and args.frames <= 0:
        logger.error("--frames must be positive")
        return 2

    try:
        app = FlySim(settings, max_frames=args.frames)
        app.run()
        return 0
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Fatal error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
