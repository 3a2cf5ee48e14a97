"""Shared test fixtures – small synthetic hit-point clouds."""

from __future__ import annotations

import numpy as np
import pytest


def _ring_points(
    normal: np.ndarray,
    centre: np.ndarray,
    radius: float = 10.0,
    n: int = 8,
) -> np.ndarray:
    """*n* points on a circle in the plane through *centre* with *normal*.

    Points go counter-clockwise seen from the tip of *normal*, so every
    triple i < j < k winds the same way and yields +normal.
    """
    normal = normal / np.linalg.norm(normal)
    helper = np.array([1.0, 0.0, 0.0]) if abs(normal[0]) < 0.9 else np.array([0.0, 1.0, 0.0])
    u = np.cross(normal, helper)
    u /= np.linalg.norm(u)
    v = np.cross(normal, u)
    theta = np.linspace(0.0, 2 * np.pi, n, endpoint=False)
    return centre + radius * (np.cos(theta)[:, None] * u + np.sin(theta)[:, None] * v)


@pytest.fixture()
def flat_points() -> np.ndarray:
    """Five hits on a horizontal floor at z=5."""
    return np.array(
        [[0, 0, 5], [10, 0, 5], [0, 10, 5], [10, 10, 5], [5, 5, 5]],
        dtype=np.float64,
    )


@pytest.fixture()
def wall_points() -> np.ndarray:
    """Hits on the plane y=0 (a floor tipped 90° about X)."""
    return np.array(
        [[0, 0, 0], [10, 0, 0], [10, 0, 10], [0, 0, 10], [5, 0, 3]],
        dtype=np.float64,
    )


@pytest.fixture()
def tilted_normal() -> np.ndarray:
    n = np.array([0.2, -0.1, 1.0])
    return n / np.linalg.norm(n)


@pytest.fixture()
def cluster_with_outlier(tilted_normal: np.ndarray) -> np.ndarray:
    """Eight coplanar hits on a tilted slope plus one hit far off the slope."""
    centre = np.array([100.0, 50.0, 20.0])
    ring = _ring_points(tilted_normal, centre, radius=40.0, n=8)
    outlier = centre + 80.0 * tilted_normal + np.array([12.0, -7.0, 0.0])
    return np.vstack([ring, outlier])


@pytest.fixture()
def sloped_scene(tilted_normal: np.ndarray) -> np.ndarray:
    """A dense grid of scene points on the tilted slope through (0, 0, 0)."""
    xs, ys = np.meshgrid(np.arange(-200.0, 201.0, 10.0), np.arange(-200.0, 201.0, 10.0))
    nx, ny, nz = tilted_normal
    zs = -(nx * xs + ny * ys) / nz
    return np.column_stack([xs.ravel(), ys.ravel(), zs.ravel()])
