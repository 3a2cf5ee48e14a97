"""Stand-alone point-set helpers: centroid, outlier trimming, covariance fit.

None of these feed :func:`estimate_ground_rotation`; they are kept as
independent utilities for callers that want a cheaper single-pass fit.
"""

from __future__ import annotations

import numpy as np

from packages.core.types import Plane, Vec3
from packages.orientation.vecmath import as_array, as_points


def compute_centroid(points) -> np.ndarray:
    """Return the mean of an (N, 3) point set."""
    pts = as_points(points)
    if len(pts) == 0:
        raise ValueError("Cannot compute the centroid of an empty point set")
    return pts.mean(axis=0)


def remove_outliers(points, centroid, threshold: float) -> np.ndarray:
    """Return the points within *threshold* of *centroid*, order preserved.

    The input is not modified.
    """
    pts = as_points(points)
    c = as_array(centroid)
    d2 = np.sum((pts - c) ** 2, axis=1)
    return pts[d2 <= threshold * threshold]


def fit_plane_covariance(points) -> Plane:
    """Cheap plane fit from the scatter matrix of *points*.

    The scatter matrix starts from the identity, accumulates the outer
    products of the centred points, and the row with the smallest row sum
    is taken as the normal.  This is a heuristic, not an eigen-decomposition:
    it is only exact when the scatter matrix is already axis aligned.
    """
    pts = as_points(points)
    if len(pts) < 3:
        raise ValueError("Need at least 3 points to fit a plane")

    centroid = pts.mean(axis=0)
    centred = pts - centroid
    scatter = np.eye(3) + centred.T @ centred

    row = scatter[int(np.argmin(scatter.sum(axis=1)))]
    norm = float(np.linalg.norm(row))
    if norm == 0.0:
        raise ValueError("Scatter row is zero; cannot derive a normal")
    return Plane(origin=Vec3.from_seq(centroid), normal=Vec3.from_seq(row / norm))
