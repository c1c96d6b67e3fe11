"""Heads-up text overlay.

Shows the airplane's speed, altitude and attitude, and the chase camera's
tracking state, in the top-left corner.
"""

import pygame

from flysim.camera.chase_camera import ChaseCamera
from flysim.physics.flight_model.airplane import Airplane


class FlightDisplay:
    """Text readouts drawn over the scene."""

    def __init__(self, airplane: Airplane, camera: ChaseCamera, font_size: int = 18) -> None:
        """Initialize the overlay.

        Args:
            airplane: Airplane to read.
            camera: Camera to read.
            font_size: Font size in points.
        """
        if not pygame.font.get_init():
            pygame.font.init()
        self.airplane = airplane
        self.camera = camera
        self.font = pygame.font.Font(None, font_size)
        self.color = (255, 255, 255)

    def get_lines(self) -> list[str]:
        """Text lines of the overlay."""
        airplane = self.airplane
        if self.camera.stationary:
            camera_state = "settled"
        elif self.camera.timer > 0.0:
            camera_state = f"waiting {self.camera.timer:.2f}s"
        else:
            camera_state = "tracking"

        altitude = airplane.position[2]
        heading = airplane.get_heading_degrees()
        bank = airplane.get_bank_degrees()
        pitch = airplane.get_pitch_degrees()
        return [
            f"Throttle {airplane.speed:4.2f}   Airspeed {airplane.get_airspeed():5.2f}",
            f"Altitude {altitude:6.2f}   Heading {heading:5.1f}°",
            f"Bank {bank:+6.1f}°   Pitch {pitch:+6.1f}°",
            f"Camera {camera_state}",
        ]

    def draw(self, surface: pygame.Surface) -> None:
        """Draw the readouts."""
        y = 8
        for line in self.get_lines():
            text = self.font.render(line, True, self.color)
            surface.blit(text, (8, y))
            y += text.get_height() + 2
