"""Per-component ground alignment: sample beneath each bounds, then estimate."""

from __future__ import annotations

import logging
from typing import Sequence

from packages.core.types import ComponentAlignment, ComponentBounds, EstimateStatus
from packages.orientation.estimator import PlaneOrientationEstimator
from packages.orientation.sampling import (
    GRID_STEP,
    RAY_LENGTH,
    PointCloudRaycaster,
    Raycaster,
    sample_ground,
)

logger = logging.getLogger(__name__)


def align_components(
    scene_points,
    components: Sequence[ComponentBounds],
    *,
    step: float = GRID_STEP,
    max_distance: float = RAY_LENGTH,
    hit_radius: float = 25.0,
    raycaster: Raycaster | None = None,
    **estimator_kwargs,
) -> list[ComponentAlignment]:
    """Estimate a ground rotation for every component in *components*.

    Hits are gathered by casting a grid of rays down from the bottom of each
    component's bounds.  Pass *raycaster* to sample something other than
    *scene_points*.
    """
    raycaster = raycaster or PointCloudRaycaster(scene_points, hit_radius=hit_radius)
    estimator = PlaneOrientationEstimator(**estimator_kwargs)

    results: list[ComponentAlignment] = []
    for comp in components:
        hits = sample_ground(comp.bounds, raycaster, step=step, max_distance=max_distance)
        estimate = estimator.estimate(hits)
        if estimate.status in (EstimateStatus.INSUFFICIENT_POINTS, EstimateStatus.NO_VALID_PLANE):
            logger.warning("Component %r left unrotated (%s)", comp.name, estimate.status.value)
        else:
            logger.info("Component %r rotated by %.2f°", comp.name, estimate.angle_deg)
        results.append(
            ComponentAlignment(
                name=comp.name,
                bounds=comp.bounds,
                hit_count=len(hits),
                estimate=estimate,
            )
        )
    return results
