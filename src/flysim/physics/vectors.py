"""Vector and matrix helpers on top of numpy.

Vectors are ``numpy`` float arrays of shape (3,), transforms are (4, 4)
homogeneous matrices using the column-vector convention (``M @ v``). The
rotation helpers compose in body space like the usual OpenGL math libraries:
``rotate(m, angle, axis)`` returns ``m @ R(angle, axis)``.

Typical usage example:
    from flysim.physics.vectors import look_at, normalize, rotate, vec3

    rotation = rotate(np.identity(4), math.pi / 6, vec3(1.0, 0.0, 0.0))
    view = look_at(eye, center, up)
"""

import math

import numpy as np

# Below this length a vector is treated as zero
EPSILON = 1e-12

WORLD_UP = np.array([0.0, 0.0, 1.0])


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    """Create a 3-vector."""
    return np.array([x, y, z], dtype=float)


def length(v: np.ndarray) -> float:
    """Euclidean length of a vector."""
    return float(np.linalg.norm(v))


def normalize(v: np.ndarray) -> np.ndarray:
    """Return the unit vector along ``v``.

    A zero (or numerically zero) vector normalizes to the zero vector instead
    of producing NaNs.

    Args:
        v: Vector to normalize.

    Returns:
        New unit-length array, or a zero array of the same shape.
    """
    v = np.asarray(v, dtype=float)
    norm = np.linalg.norm(v)
    if norm < EPSILON:
        return np.zeros_like(v)
    return v / norm


def sign(x: float) -> float:
    """Sign of ``x`` as -1.0, 0.0 or 1.0 (exact zero gives 0.0)."""
    if x > 0.0:
        return 1.0
    if x < 0.0:
        return -1.0
    return 0.0


def rotation(angle: float, axis: np.ndarray) -> np.ndarray:
    """Homogeneous rotation of ``angle`` radians about ``axis`` (right-handed).

    Args:
        angle: Rotation angle in radians.
        axis: Rotation axis; normalized here.

    Returns:
        4x4 rotation matrix. Identity if the axis is zero.
    """
    a = normalize(axis)
    result = np.identity(4)
    if not a.any():
        return result

    c = math.cos(angle)
    s = math.sin(angle)
    x, y, z = a
    cross = np.array(
        [
            [0.0, -z, y],
            [z, 0.0, -x],
            [-y, x, 0.0],
        ]
    )
    result[:3, :3] = c * np.identity(3) + (1.0 - c) * np.outer(a, a) + s * cross
    return result


def rotate(matrix: np.ndarray, angle: float, axis: np.ndarray) -> np.ndarray:
    """Compose a body-space rotation onto ``matrix`` (``matrix @ R``)."""
    return matrix @ rotation(angle, axis)


def translate(offset: np.ndarray) -> np.ndarray:
    """Homogeneous translation matrix."""
    result = np.identity(4)
    result[:3, 3] = offset
    return result


def transform_direction(matrix: np.ndarray, direction: np.ndarray) -> np.ndarray:
    """Apply the linear part of a homogeneous matrix to a direction (w = 0)."""
    return (matrix @ np.append(direction, 0.0))[:3]


def transform_point(matrix: np.ndarray, point: np.ndarray) -> np.ndarray:
    """Apply a homogeneous matrix to a point (w = 1) without perspective divide."""
    return (matrix @ np.append(point, 1.0))[:3]


def look_at(eye: np.ndarray, center: np.ndarray, up: np.ndarray) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` toward ``center``.

    Args:
        eye: Camera position.
        center: Point looked at.
        up: Approximate up direction.

    Returns:
        4x4 view matrix mapping world space to eye space (camera looks down -Z).
    """
    f = normalize(np.asarray(center, dtype=float) - eye)
    s = normalize(np.cross(f, up))
    if not s.any():
        # Looking along up: any side vector perpendicular to f will do
        fallback = vec3(1.0, 0.0, 0.0) if abs(f[0]) < 0.9 else vec3(0.0, 1.0, 0.0)
        s = normalize(np.cross(f, fallback))
    u = np.cross(s, f)

    result = np.identity(4)
    result[0, :3] = s
    result[1, :3] = u
    result[2, :3] = -f
    result[0, 3] = -np.dot(s, eye)
    result[1, 3] = -np.dot(u, eye)
    result[2, 3] = np.dot(f, eye)
    return result


def perspective(fov_y: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection with a [-1, 1] depth range.

    Args:
        fov_y: Vertical field of view in radians.
        aspect: Viewport width divided by height.
        near: Near clip distance.
        far: Far clip distance.

    Returns:
        4x4 projection matrix.

    Raises:
        ValueError: If the parameters do not describe a valid frustum.
    """
    if not 0.0 < fov_y < math.pi:
        raise ValueError(f"fov_y must be in (0, pi), got {fov_y}")
    if aspect <= 0.0:
        raise ValueError(f"aspect must be positive, got {aspect}")
    if not 0.0 < near < far:
        raise ValueError(f"Expected 0 < near < far, got near={near}, far={far}")

    f = 1.0 / math.tan(fov_y / 2.0)
    result = np.zeros((4, 4))
    result[0, 0] = f / aspect
    result[1, 1] = f
    result[2, 2] = -(far + near) / (far - near)
    result[2, 3] = -(2.0 * far * near) / (far - near)
    result[3, 2] = -1.0
    return result
