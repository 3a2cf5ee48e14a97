"""Convert a plane normal into the rotation that takes "up" onto it."""

from __future__ import annotations

import logging

import numpy as np

from packages.core.types import EstimateStatus, Quaternion, Vec3
from packages.orientation.vecmath import (
    UP,
    any_perpendicular,
    as_array,
    clamped_angle,
    quat_from_axis_angle,
    safe_normalize,
)

logger = logging.getLogger(__name__)

PARALLEL_EPS = 1e-9


def rotation_from_normal(
    normal: Vec3 | np.ndarray,
    *,
    up: Vec3 | np.ndarray = UP,
    parallel_eps: float = PARALLEL_EPS,
) -> tuple[Quaternion, EstimateStatus]:
    """Return the minimal rotation mapping *up* onto *normal*.

    The axis is ``normalize(up × normal)`` and the angle
    ``arccos(up · normal)``.  When the two vectors are parallel the cross
    product vanishes and the axis is undefined, so:

    * same direction → identity,
    * opposite direction → 180° about an axis perpendicular to *up*,

    both reported as :attr:`EstimateStatus.DEGENERATE_NORMAL_ALIGNMENT`.
    """
    n = safe_normalize(as_array(normal))
    u = safe_normalize(as_array(up))
    if n is None or u is None:
        raise ValueError("normal and up must be non-zero vectors")

    cross = np.cross(u, n)
    if float(np.linalg.norm(cross)) <= parallel_eps:
        if float(np.dot(u, n)) > 0:
            return Quaternion.identity(), EstimateStatus.DEGENERATE_NORMAL_ALIGNMENT
        axis = any_perpendicular(u)
        logger.debug("Normal is opposite to up; flipping 180° about %s", axis)
        return quat_from_axis_angle(axis, np.pi), EstimateStatus.DEGENERATE_NORMAL_ALIGNMENT

    angle = clamped_angle(u, n)
    axis = cross / np.linalg.norm(cross)
    return quat_from_axis_angle(axis, angle), EstimateStatus.OK
