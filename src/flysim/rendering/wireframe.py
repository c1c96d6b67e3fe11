"""Software wireframe rendering with pygame.

Points are pushed through projection @ view @ model with numpy and drawn as
2D lines. Segments with an endpoint behind the camera are skipped rather
than clipped, which is good enough for a chase view.

Typical usage example:
    from flysim.rendering.wireframe import AirplaneWireframe, GroundGrid

    model = AirplaneWireframe()
    grid = GroundGrid()
    model.draw(screen)
"""

import numpy as np
import pygame

from flysim.rendering.base import IRenderable

# Clip-space w below this is treated as behind the camera
MIN_CLIP_W = 1e-6

# Airplane outline in body space (x forward, y left, z up)
AIRPLANE_VERTICES = np.array(
    [
        [0.060, 0.000, 0.000],  # 0 nose
        [-0.050, 0.000, 0.000],  # 1 tail
        [0.010, 0.065, 0.000],  # 2 left wing tip, leading edge
        [-0.010, 0.065, 0.000],  # 3 left wing tip, trailing edge
        [0.010, -0.065, 0.000],  # 4 right wing tip, leading edge
        [-0.010, -0.065, 0.000],  # 5 right wing tip, trailing edge
        [0.015, 0.000, 0.000],  # 6 wing root, leading edge
        [-0.015, 0.000, 0.000],  # 7 wing root, trailing edge
        [-0.050, 0.025, 0.000],  # 8 left stabilizer tip
        [-0.050, -0.025, 0.000],  # 9 right stabilizer tip
        [-0.035, 0.000, 0.000],  # 10 stabilizer root
        [-0.050, 0.000, 0.025],  # 11 fin top
    ]
)

AIRPLANE_EDGES = [
    (0, 1),
    (6, 2),
    (2, 3),
    (3, 7),
    (6, 4),
    (4, 5),
    (5, 7),
    (10, 8),
    (8, 1),
    (10, 9),
    (9, 1),
    (10, 11),
    (11, 1),
]

AIRPLANE_FACES = [
    (6, 2, 3, 7),
    (6, 4, 5, 7),
    (10, 8, 1, 9),
]


def project_points(
    points: np.ndarray, mvp: np.ndarray, size: tuple[int, int]
) -> tuple[np.ndarray, np.ndarray]:
    """Project points to screen pixels.

    Args:
        points: (N, 3) array of points.
        mvp: Combined projection @ view @ model matrix.
        size: Viewport (width, height) in pixels.

    Returns:
        Tuple of (N, 2) pixel coordinates and an (N,) mask of points in
        front of the camera. Coordinates of masked-out points are undefined.
    """
    points = np.asarray(points, dtype=float)
    homogeneous = np.hstack([points, np.ones((len(points), 1))])
    clip = homogeneous @ mvp.T
    w = clip[:, 3]
    visible = w > MIN_CLIP_W

    safe_w = np.where(visible, w, 1.0)
    ndc = clip[:, :3] / safe_w[:, None]

    width, height = size
    screen = np.empty((len(points), 2))
    screen[:, 0] = (ndc[:, 0] + 1.0) * 0.5 * width
    screen[:, 1] = (1.0 - ndc[:, 1]) * 0.5 * height
    return screen, visible


class WireframeRenderable(IRenderable):
    """Renderable made of vertices and edges."""

    def __init__(
        self,
        vertices: np.ndarray,
        edges: list[tuple[int, int]],
        color: tuple[int, int, int] = (230, 230, 230),
    ) -> None:
        """Initialize with geometry in model space."""
        super().__init__()
        self.vertices = np.asarray(vertices, dtype=float)
        self.edges = edges
        self.color = color

    def mvp(self) -> np.ndarray:
        """Combined projection @ view @ model matrix."""
        return self.projection_matrix @ self.view_matrix @ self.model_matrix

    def draw(self, surface: pygame.Surface) -> None:
        """Draw the edges that are fully in front of the camera."""
        screen, visible = project_points(self.vertices, self.mvp(), surface.get_size())
        for start, end in self.edges:
            if visible[start] and visible[end]:
                pygame.draw.line(surface, self.color, tuple(screen[start]), tuple(screen[end]))


class AirplaneWireframe(WireframeRenderable):
    """The player airplane, as outlines or with filled wings."""

    def __init__(self, wireframe: bool = False, scale: float = 1.0) -> None:
        """Initialize the airplane shape.

        Args:
            wireframe: Draw outlines only.
            scale: Size multiplier for the outline.
        """
        super().__init__(AIRPLANE_VERTICES * scale, AIRPLANE_EDGES, color=(240, 240, 240))
        self.wireframe = wireframe
        self.fill_color = (200, 60, 50)

    def draw(self, surface: pygame.Surface) -> None:
        """Draw the filled surfaces (unless in wireframe mode), then the outline."""
        if not self.wireframe:
            screen, visible = project_points(self.vertices, self.mvp(), surface.get_size())
            for face in AIRPLANE_FACES:
                if all(visible[i] for i in face):
                    points = [tuple(screen[i]) for i in face]
                    pygame.draw.polygon(surface, self.fill_color, points)
        super().draw(surface)


class GroundGrid(WireframeRenderable):
    """Flat reference grid at z = 0 that moves along with the airplane."""

    def __init__(self, extent: float = 10.0, spacing: float = 0.5) -> None:
        """Build the grid lines.

        Args:
            extent: Half width of the grid.
            spacing: Distance between lines.

        Raises:
            ValueError: If extent or spacing is not positive.
        """
        if extent <= 0.0 or spacing <= 0.0:
            raise ValueError("Grid extent and spacing must be positive")

        self.spacing = spacing
        vertices = []
        edges = []
        for offset in np.arange(-extent, extent + spacing / 2.0, spacing):
            index = len(vertices)
            vertices += [[offset, -extent, 0.0], [offset, extent, 0.0]]
            vertices += [[-extent, offset, 0.0], [extent, offset, 0.0]]
            edges += [(index, index + 1), (index + 2, index + 3)]

        super().__init__(np.array(vertices), edges, color=(60, 110, 60))

    def set_center(self, position: np.ndarray) -> None:
        """Center the grid under a position, snapped to the grid spacing."""
        snapped = np.round(np.asarray(position[:2], dtype=float) / self.spacing) * self.spacing
        transform = np.identity(4)
        transform[:2, 3] = snapped
        self.set_transform(transform)
