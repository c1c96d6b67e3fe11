"""Abstract interface for things drawn each frame.

Renderables receive their model transform, the camera's view matrix and the
projection matrix as 4x4 numpy arrays, and draw themselves onto a pygame
surface.

Typical usage example:
    from flysim.rendering.base import IRenderable

    class Marker(IRenderable):
        def draw(self, surface: pygame.Surface) -> None:
            ...
"""

from abc import ABC, abstractmethod

import numpy as np
import pygame


class IRenderable(ABC):
    """Something with model, view and projection matrices that can be drawn."""

    def __init__(self) -> None:
        """Start with identity matrices."""
        self.model_matrix = np.identity(4)
        self.view_matrix = np.identity(4)
        self.projection_matrix = np.identity(4)

    def set_transform(self, transform: np.ndarray) -> None:
        """Set the model (object to world) transform."""
        self.model_matrix = np.array(transform, dtype=float)

    def set_view(self, view: np.ndarray) -> None:
        """Set the view (world to eye) matrix."""
        self.view_matrix = np.array(view, dtype=float)

    def set_projection(self, projection: np.ndarray) -> None:
        """Set the projection (eye to clip) matrix."""
        self.projection_matrix = np.array(projection, dtype=float)

    @abstractmethod
    def draw(self, surface: pygame.Surface) -> None:
        """Draw onto a surface.

        Args:
            surface: Target surface; its size defines the viewport.
        """
