"""End-to-end ground orientation: points → candidate planes → median → rotation."""

from __future__ import annotations

import logging

import numpy as np

from packages.core.types import EstimateStatus, GroundEstimate, Plane, Quaternion, Vec3
from packages.orientation.median import select_median_plane
from packages.orientation.rotation import PARALLEL_EPS, rotation_from_normal
from packages.orientation.triples import COLLINEAR_EPS, enumerate_planes
from packages.orientation.vecmath import UP, as_array, as_points

logger = logging.getLogger(__name__)

# Above this many points the O(n^6) search gets slow; we warn but still run.
WARN_POINT_COUNT = 60


class PlaneOrientationEstimator:
    """Estimate the rotation that aligns *up* with the ground under a point cloud.

    Instances only hold configuration; :meth:`estimate` is a pure function
    of its input and can be called from several threads at once.
    """

    def __init__(
        self,
        *,
        collinear_eps: float = COLLINEAR_EPS,
        parallel_eps: float = PARALLEL_EPS,
        up: Vec3 | np.ndarray = UP,
        warn_point_count: int = WARN_POINT_COUNT,
        block_size: int = 512,
    ):
        self.collinear_eps = collinear_eps
        self.parallel_eps = parallel_eps
        self.up = as_array(up)
        self.warn_point_count = warn_point_count
        self.block_size = block_size

    def enumerate(self, points) -> list[Plane]:
        return enumerate_planes(points, collinear_eps=self.collinear_eps)

    def select(self, planes: list[Plane]) -> Plane:
        return select_median_plane(planes, block_size=self.block_size)

    def to_rotation(self, normal: Vec3) -> tuple[Quaternion, EstimateStatus]:
        return rotation_from_normal(normal, up=self.up, parallel_eps=self.parallel_eps)

    def estimate(self, points) -> GroundEstimate:
        """Run the full pipeline on *points*.

        Never raises for sparse or degenerate clouds: those return the
        identity rotation with a non-OK :class:`EstimateStatus`.  Input that
        is not shaped (N, 3) raises ``ValueError``.
        """
        pts = as_points(points)
        n = len(pts)

        if n < 3:
            logger.warning("Not enough points to define a plane (%d < 3)", n)
            return GroundEstimate(status=EstimateStatus.INSUFFICIENT_POINTS, point_count=n)

        if n > self.warn_point_count:
            logger.warning(
                "Estimating from %d points: triple search is O(n^6), expect a slow run", n,
            )

        planes = self.enumerate(pts)
        if not planes:
            logger.warning("All %d points are collinear; no valid plane", n)
            return GroundEstimate(status=EstimateStatus.NO_VALID_PLANE, point_count=n)

        best = self.select(planes)
        # Normal sign follows triple winding; report the side facing up.
        if float(np.dot(as_array(best.normal), self.up)) < 0:
            best = best.flipped()
        rotation, status = self.to_rotation(best.normal)
        _, angle = rotation.axis_angle()

        logger.info(
            "Ground normal (%.4f, %.4f, %.4f) from %d candidates → %.2f°",
            best.normal.x, best.normal.y, best.normal.z, len(planes), np.degrees(angle),
        )
        return GroundEstimate(
            rotation=rotation,
            status=status,
            plane=best,
            point_count=n,
            candidate_count=len(planes),
            angle_deg=float(np.degrees(angle)),
        )


def estimate_ground_rotation(points, **kwargs) -> GroundEstimate:
    """Convenience wrapper: ``PlaneOrientationEstimator(**kwargs).estimate(points)``."""
    return PlaneOrientationEstimator(**kwargs).estimate(points)
