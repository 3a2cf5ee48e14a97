"""Exhaustive plane enumeration over point triples."""

from __future__ import annotations

import logging
from itertools import combinations

import numpy as np

from packages.core.types import Plane, Vec3
from packages.orientation.vecmath import as_points

logger = logging.getLogger(__name__)

# Squared cross-product length at or below which a triple counts as collinear.
COLLINEAR_EPS = 1e-8


def plane_from_triple(
    a: np.ndarray,
    b: np.ndarray,
    c: np.ndarray,
    *,
    collinear_eps: float = COLLINEAR_EPS,
) -> Plane | None:
    """Return the plane through *a*, *b*, *c*, or *None* if they are collinear.

    The normal is ``(b - a) × (c - a)`` normalised, so its sign follows the
    winding of the triple.
    """
    cross = np.cross(b - a, c - a)
    sq = float(np.dot(cross, cross))
    if sq <= collinear_eps:
        return None
    normal = cross / np.sqrt(sq)
    return Plane(origin=Vec3.from_seq(a), normal=Vec3.from_seq(normal))


def enumerate_planes(
    points,
    *,
    collinear_eps: float = COLLINEAR_EPS,
) -> list[Plane]:
    """Build a plane through every unordered triple ``i < j < k`` of *points*.

    Degenerate (collinear or coincident) triples are skipped.  Fewer than
    three points gives an empty list.

    The candidate count grows as C(n, 3), so this is meant for clouds of
    tens of points.
    """
    pts = as_points(points)
    n = len(pts)
    if n < 3:
        return []

    planes: list[Plane] = []
    skipped = 0
    for i, j, k in combinations(range(n), 3):
        plane = plane_from_triple(pts[i], pts[j], pts[k], collinear_eps=collinear_eps)
        if plane is None:
            skipped += 1
            continue
        planes.append(plane)

    logger.debug(
        "Enumerated %d candidate planes from %d points (%d degenerate triples)",
        len(planes), n, skipped,
    )
    return planes
