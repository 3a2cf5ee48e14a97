"""Small vector / quaternion helpers on top of NumPy."""

from __future__ import annotations

import numpy as np

from packages.core.types import Quaternion, Vec3

UP = np.array([0.0, 0.0, 1.0])


def as_array(v: Vec3 | np.ndarray | tuple | list) -> np.ndarray:
    """Return *v* as a float64 array of shape (3,)."""
    if isinstance(v, Vec3):
        return np.array(v.as_tuple(), dtype=np.float64)
    arr = np.asarray(v, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {arr.shape}")
    return arr


def as_points(points) -> np.ndarray:
    """Coerce a point sequence (arrays, tuples or Vec3) to an (N, 3) array."""
    if isinstance(points, np.ndarray):
        arr = points.astype(np.float64, copy=False)
    else:
        rows = [as_array(p) for p in points]
        arr = np.array(rows, dtype=np.float64).reshape(len(rows), 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"Expected an (N, 3) point array, got shape {arr.shape}")
    if not np.isfinite(arr).all():
        raise ValueError("Point coordinates must be finite")
    return arr


def safe_normalize(v: np.ndarray, eps: float = 1e-12) -> np.ndarray | None:
    """Return the unit vector along *v*, or *None* when *v* is ~zero."""
    norm = float(np.linalg.norm(v))
    if norm <= eps:
        return None
    return v / norm


def clamped_angle(a: np.ndarray, b: np.ndarray) -> float:
    """Angle (radians) between unit vectors *a* and *b*.

    The dot product is clipped to [-1, 1] so rounding never yields NaN.
    """
    return float(np.arccos(np.clip(np.dot(a, b), -1.0, 1.0)))


def any_perpendicular(v: np.ndarray) -> np.ndarray:
    """Return a unit vector perpendicular to unit vector *v*."""
    # Cross with the basis axis least aligned with v.
    basis = np.eye(3)[int(np.argmin(np.abs(v)))]
    perp = np.cross(v, basis)
    return perp / np.linalg.norm(perp)


def quat_from_axis_angle(axis: np.ndarray, angle: float) -> Quaternion:
    """Build a unit quaternion rotating *angle* radians about unit *axis*."""
    half = 0.5 * angle
    s = np.sin(half)
    return Quaternion(
        w=float(np.cos(half)),
        x=float(axis[0] * s),
        y=float(axis[1] * s),
        z=float(axis[2] * s),
    )


def quat_rotate(q: Quaternion, v: np.ndarray) -> np.ndarray:
    """Rotate vector *v* by quaternion *q*."""
    u = np.array([q.x, q.y, q.z])
    v = np.asarray(v, dtype=np.float64)
    t = 2.0 * np.cross(u, v)
    return v + q.w * t + np.cross(u, t)
