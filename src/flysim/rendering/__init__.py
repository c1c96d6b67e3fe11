"""Rendering collaborators: renderable interface and pygame wireframes."""

from flysim.rendering.base import IRenderable
from flysim.rendering.wireframe import AirplaneWireframe, GroundGrid, project_points

__all__ = ["AirplaneWireframe", "GroundGrid", "IRenderable", "project_points"]
