"""Grid sampling of ground hits beneath a bounding box.

Rays are cast straight down (-Z) from a regular XY grid laid over the
bottom face of the bounds.  The scene itself is abstracted behind the
:class:`Raycaster` protocol; :class:`PointCloudRaycaster` stands in for a
collision scene when all we have is a scanned point cloud.
"""

from __future__ import annotations

import logging
from typing import Iterator, Protocol

import numpy as np
from scipy.spatial import cKDTree

from packages.core.types import BBox, Vec3
from packages.orientation.vecmath import as_points

logger = logging.getLogger(__name__)

GRID_STEP = 50.0
RAY_LENGTH = 1000.0


class Raycaster(Protocol):
    def cast_down(self, origin: np.ndarray, max_distance: float) -> Vec3 | None:
        """Return the first hit below *origin* within *max_distance*, if any."""
        ...


class PointCloudRaycaster:
    """Ray-cast against a point cloud by looking up points near the ray in XY.

    A ray "hits" the highest cloud point lying within *hit_radius* of the
    ray's XY position, at or below the origin and no further than
    *max_distance* beneath it.
    """

    def __init__(self, points, hit_radius: float = 25.0):
        if hit_radius <= 0:
            raise ValueError("hit_radius must be positive")
        self.points = as_points(points)
        self.hit_radius = hit_radius
        self._tree = cKDTree(self.points[:, :2]) if len(self.points) else None

    def cast_down(self, origin: np.ndarray, max_distance: float) -> Vec3 | None:
        if self._tree is None:
            return None
        idx = sorted(self._tree.query_ball_point(origin[:2], self.hit_radius))
        if not idx:
            return None
        z = self.points[idx, 2]
        below = (z <= origin[2]) & (z >= origin[2] - max_distance)
        if not below.any():
            return None
        candidates = np.asarray(idx)[below]
        # Lowest index among equally high points keeps the result stable.
        best = candidates[np.argmax(self.points[candidates, 2])]
        return Vec3.from_seq(self.points[best])


def _axis_count(lo: float, hi: float, step: float) -> int:
    if not (np.isfinite(lo) and np.isfinite(hi)):
        raise ValueError("bounds must be finite")
    return max(int(np.ceil((hi - lo) / step - 1e-9)), 0)


def _axis_coords(lo: float, hi: float, step: float) -> np.ndarray:
    """Grid coordinates ``lo + i * step`` strictly below *hi*."""
    coords = lo + step * np.arange(_axis_count(lo, hi, step), dtype=np.float64)
    return coords[coords < hi]


def grid_ray_count(bounds: BBox, step: float = GRID_STEP) -> int:
    """Upper bound on the rays :func:`grid_ray_origins` yields, without building them."""
    if step <= 0:
        raise ValueError("step must be positive")
    nx = _axis_count(bounds.min.x, bounds.max.x, step)
    ny = _axis_count(bounds.min.y, bounds.max.y, step)
    return nx * ny


def grid_ray_origins(bounds: BBox, step: float = GRID_STEP) -> Iterator[np.ndarray]:
    """Yield ray origins ``(x, y, min.z)`` over the half-open XY extent of *bounds*."""
    if step <= 0:
        raise ValueError("step must be positive")
    z = bounds.min.z
    for x in _axis_coords(bounds.min.x, bounds.max.x, step):
        for y in _axis_coords(bounds.min.y, bounds.max.y, step):
            yield np.array([x, y, z], dtype=np.float64)


def sample_ground(
    bounds: BBox,
    raycaster: Raycaster,
    *,
    step: float = GRID_STEP,
    max_distance: float = RAY_LENGTH,
) -> np.ndarray:
    """Cast the grid of rays under *bounds* and return the hits as (N, 3)."""
    hits: list[tuple[float, float, float]] = []
    casts = 0
    for origin in grid_ray_origins(bounds, step):
        casts += 1
        hit = raycaster.cast_down(origin, max_distance)
        if hit is None:
            continue
        logger.debug("Hit at location %s", hit.as_tuple())
        hits.append(hit.as_tuple())

    logger.info("Sampled %d ground hits from %d rays", len(hits), casts)
    return np.array(hits, dtype=np.float64).reshape(-1, 3)
