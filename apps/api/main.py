"""FastAPI application exposing the ground orientation estimator.

Callers POST the hit points they sampled (or a scene cloud plus component
bounds) and get back the rotation to apply, with a diagnostic status.  The
service is stateless.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from packages.core.types import ComponentAlignment, ComponentBounds, GroundEstimate
from packages.orientation.align import align_components
from packages.orientation.estimator import estimate_ground_rotation
from packages.orientation.sampling import GRID_STEP, RAY_LENGTH, grid_ray_count
from packages.orientation.triples import COLLINEAR_EPS

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Ground Orientation API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # permissive for local development; tighten for production
    allow_methods=["*"],
    allow_headers=["*"],
)

Point = tuple[float, float, float]

# Request limits: the triple search is O(n^6) in the hit count, and every ray
# under a component can become a hit.
MAX_ESTIMATE_POINTS = 64
MAX_SCENE_POINTS = 500_000
MAX_RAYS_PER_COMPONENT = MAX_ESTIMATE_POINTS


class EstimateRequest(BaseModel):
    """Body for the estimate endpoint."""
    points: list[Point]
    collinear_eps: float = Field(COLLINEAR_EPS, gt=0)


class AlignRequest(BaseModel):
    """Body for the align endpoint."""
    scene: list[Point]
    components: list[ComponentBounds]
    step: float = Field(GRID_STEP, gt=0)
    max_distance: float = Field(RAY_LENGTH, gt=0)
    hit_radius: float = Field(25.0, gt=0)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/estimate", response_model=GroundEstimate)
def estimate(req: EstimateRequest):
    """Estimate the ground rotation for a list of hit points."""
    if len(req.points) > MAX_ESTIMATE_POINTS:
        raise HTTPException(400, f"Too many points ({len(req.points)} > {MAX_ESTIMATE_POINTS})")

    logger.info(f"📐 Estimating ground rotation from {len(req.points)} points")
    try:
        result = estimate_ground_rotation(req.points, collinear_eps=req.collinear_eps)
    except ValueError as e:
        raise HTTPException(400, str(e))
    except Exception as e:
        logger.exception("Estimation failed")
        raise HTTPException(500, f"Estimation failed: {e}")

    logger.info(f"✅ Status {result.status.value}, angle {result.angle_deg:.2f}°")
    return result


@app.post("/align", response_model=list[ComponentAlignment])
def align(req: AlignRequest):
    """Sample the scene under each component's bounds and estimate its rotation."""
    if not req.components:
        raise HTTPException(400, "Need at least one component")
    if len(req.scene) > MAX_SCENE_POINTS:
        raise HTTPException(400, f"Scene too large ({len(req.scene)} > {MAX_SCENE_POINTS} points)")
    for comp in req.components:
        try:
            rays = grid_ray_count(comp.bounds, req.step)
        except ValueError as e:
            raise HTTPException(400, str(e))
        if rays > MAX_RAYS_PER_COMPONENT:
            raise HTTPException(
                400,
                f"Component {comp.name!r} needs {rays} rays (max {MAX_RAYS_PER_COMPONENT}); use a larger step",
            )

    logger.info(f"🧭 Aligning {len(req.components)} components against {len(req.scene)} scene points")
    try:
        results = align_components(
            req.scene,
            req.components,
            step=req.step,
            max_distance=req.max_distance,
            hit_radius=req.hit_radius,
        )
    except ValueError as e:
        raise HTTPException(400, str(e))
    except Exception as e:
        logger.exception("Alignment failed")
        raise HTTPException(500, f"Alignment failed: {e}")

    return results
