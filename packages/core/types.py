"""Pydantic models for ground-orientation estimates.

Everything here is a value type: points, planes and rotations carry no
identity beyond their components and live only for the duration of a
single estimation call.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ── tiny helpers ──────────────────────────────────────────────────────
class Vec3(BaseModel):
    """A 3-component vector (x, y, z) in scene units."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float

    @classmethod
    def from_seq(cls, values) -> "Vec3":
        x, y, z = (float(v) for v in values)
        return cls(x=x, y=y, z=z)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


class BBox(BaseModel):
    """Axis-aligned bounding box."""

    min: Vec3
    max: Vec3


# ── plane / rotation types ───────────────────────────────────────────
class Plane(BaseModel):
    """A plane through *origin* with unit *normal*."""

    model_config = ConfigDict(frozen=True)

    origin: Vec3
    normal: Vec3

    @property
    def offset(self) -> float:
        """Signed distance from origin (Hesse normal form: n·x = d)."""
        n, o = self.normal, self.origin
        return n.x * o.x + n.y * o.y + n.z * o.z

    def as_tuple(self) -> tuple[float, float, float, float]:
        """Return ``(nx, ny, nz, d)``."""
        return (self.normal.x, self.normal.y, self.normal.z, self.offset)

    def flipped(self) -> "Plane":
        """The same plane with its normal reversed."""
        n = self.normal
        return Plane(origin=self.origin, normal=Vec3(x=-n.x, y=-n.y, z=-n.z))


class Quaternion(BaseModel):
    """Unit quaternion ``w + xi + yj + zk``."""

    model_config = ConfigDict(frozen=True)

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def identity(cls) -> "Quaternion":
        return cls()

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.w, self.x, self.y, self.z)

    def axis_angle(self) -> tuple[Vec3, float]:
        """Return ``(axis, angle_radians)``; the identity reports the +X axis."""
        w = max(-1.0, min(1.0, self.w))
        angle = 2.0 * math.acos(w)
        s = math.sqrt(max(0.0, 1.0 - w * w))
        if s < 1e-12:
            return Vec3(x=1.0, y=0.0, z=0.0), 0.0
        return Vec3(x=self.x / s, y=self.y / s, z=self.z / s), angle


# ── estimate result ──────────────────────────────────────────────────
class EstimateStatus(str, Enum):
    OK = "ok"
    INSUFFICIENT_POINTS = "insufficient_points"
    NO_VALID_PLANE = "no_valid_plane"
    DEGENERATE_NORMAL_ALIGNMENT = "degenerate_normal_alignment"


class GroundEstimate(BaseModel):
    """Rotation aligning the reference up axis to the estimated ground plane."""

    rotation: Quaternion = Field(default_factory=Quaternion.identity)
    status: EstimateStatus = EstimateStatus.OK
    plane: Optional[Plane] = None
    point_count: int = 0
    candidate_count: int = Field(0, description="Non-degenerate planes enumerated")
    angle_deg: float = 0.0


# ── per-component alignment ──────────────────────────────────────────
class ComponentBounds(BaseModel):
    """A named mesh component and its world-space bounds."""

    name: str
    bounds: BBox


class ComponentAlignment(BaseModel):
    """Ground samples and estimate for one component."""

    name: str
    bounds: BBox
    hit_count: int = 0
    estimate: GroundEstimate
