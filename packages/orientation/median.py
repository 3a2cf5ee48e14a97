"""Median-plane selection by total angular deviation.

Each candidate is scored by the sum of the angles between its normal and
every other candidate's normal; the lowest score wins.  A plane that agrees
with most other candidates beats the scattered planes produced by noisy
triples, which makes this a robust central orientation rather than a
literal statistical median.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from packages.core.types import Plane

logger = logging.getLogger(__name__)


def normals_array(planes: Sequence[Plane]) -> np.ndarray:
    """Stack plane normals into an (M, 3) array."""
    return np.array([p.normal.as_tuple() for p in planes], dtype=np.float64).reshape(-1, 3)


def angular_deviation_sums(normals: np.ndarray, *, block_size: int = 512) -> np.ndarray:
    """Return, for each normal, the summed angle (radians) to all others.

    Dot products are clipped to [-1, 1] before ``arccos``.  Rows are
    processed *block_size* at a time so the full M×M angle matrix never has
    to be held in memory.  Each row is summed with ``math.fsum`` so equal
    multisets of angles give bit-identical totals regardless of ordering.
    """
    m = len(normals)
    sums = np.zeros(m, dtype=np.float64)
    for start in range(0, m, block_size):
        stop = min(start + block_size, m)
        dots = normals[start:stop] @ normals.T
        angles = np.arccos(np.clip(dots, -1.0, 1.0))
        # Self-comparison does not count.
        angles[np.arange(stop - start), np.arange(start, stop)] = 0.0
        sums[start:stop] = [math.fsum(row) for row in angles]
    return sums


def select_median_plane(planes: Sequence[Plane], *, block_size: int = 512) -> Plane:
    """Return the plane with the smallest total angular deviation.

    Ties go to the earliest candidate.  Raises ``ValueError`` for an empty
    candidate list.
    """
    if not planes:
        raise ValueError("Cannot select a median plane from an empty candidate set")

    sums = angular_deviation_sums(normals_array(planes), block_size=block_size)
    best = int(np.argmin(sums))
    logger.debug(
        "Median plane %d of %d (angle sum %.4f rad)", best, len(planes), sums[best],
    )
    return planes[best]
