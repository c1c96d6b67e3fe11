"""Per-frame simulation driver.

Owns the airplane, the chase camera and the renderables, and sequences one
frame: input, airplane, camera, then view distribution.

Typical usage example:
    from flysim.core.simulation import Simulation

    simulation = Simulation.create(settings)
    simulation.set_projection(projection)
    simulation.step(1 / 60)
"""

from collections.abc import Callable

import numpy as np

from flysim.camera.chase_camera import ChaseCamera
from flysim.core.logging_system import get_logger
from flysim.physics.flight_model.airplane import Airplane
from flysim.rendering.base import IRenderable
from flysim.settings.flight_settings import SimulatorSettings

logger = get_logger(__name__)


class Simulation:
    """Runs the airplane and its chase camera frame by frame.

    Attributes:
        airplane: The player airplane.
        camera: Chase camera following the airplane.
        renderables: Everything that receives the view and projection.
        input_handler: Called with ``dt`` before physics to set control impulses.
    """

    def __init__(
        self,
        airplane: Airplane,
        camera: ChaseCamera,
        renderables: list[IRenderable] | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            airplane: The player airplane.
            camera: Camera following ``airplane``.
            renderables: Additional renderables; the airplane's own model is
                updated through the airplane.
        """
        self.airplane = airplane
        self.camera = camera
        self.renderables: list[IRenderable] = list(renderables or [])
        self.input_handler: Callable[[float], None] | None = None

        self._frames = 0
        self._view_updates = 0

    @classmethod
    def create(
        cls, settings: SimulatorSettings, model: IRenderable | None = None
    ) -> "Simulation":
        """Create an airplane at its spawn pose and a camera behind it.

        Args:
            settings: Simulator settings.
            model: Visual representation of the airplane.

        Returns:
            Ready-to-step simulation.
        """
        airplane = Airplane(settings.flight, model)
        camera = ChaseCamera.following(airplane, settings.camera)
        return cls(airplane, camera)

    @property
    def frame_count(self) -> int:
        """Frames stepped so far."""
        return self._frames

    @property
    def view_update_count(self) -> int:
        """Frames in which a new view was distributed."""
        return self._view_updates

    def add_renderable(self, renderable: IRenderable) -> None:
        """Register something that needs the view and projection matrices."""
        self.renderables.append(renderable)
        renderable.set_projection(self.airplane.projection_matrix)
        renderable.set_view(self.camera.get_view())

    def set_projection(self, projection: np.ndarray) -> None:
        """Hand the projection matrix to the airplane and every renderable."""
        self.airplane.set_projection(projection)
        for renderable in self.renderables:
            renderable.set_projection(projection)
        logger.debug("Projection updated for %d renderables", len(self.renderables) + 1)

    def step(self, dt: float) -> None:
        """Advance one frame.

        Args:
            dt: Frame period in seconds.
        """
        self._frames += 1

        if self.input_handler is not None:
            self.input_handler(dt)

        self.airplane.update(dt)
        self.camera.update_view(dt)

        if self.camera.view_changed():
            self._distribute_view(self.camera.get_view())

    def _distribute_view(self, view: np.ndarray) -> None:
        self._view_updates += 1
        self.airplane.set_view(view)
        for renderable in self.renderables:
            renderable.set_view(view)
