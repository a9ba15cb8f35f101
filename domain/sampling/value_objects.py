"""Sampling Bounded Context - Value Objects.

Immutable data structures for grid height sampling.
All validation occurs at construction time via Pydantic.

Coordinates are planar LV95 (EPSG:2056) easting/northing in meters. No
reprojection happens anywhere in this context.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
MIN_GRID_SPACING_M = 0.1
MAX_GRID_SPACING_M = 100.0
DEFAULT_GRID_SPACING_M = 2.0

FALLBACK_HEIGHT_M = 0.0  # Substituted when a height lookup fails

# Output cloud appearance
CLOUD_NAME_PREFIX = "Swisstopo_Grid_Heights_"
CLOUD_COLOR: tuple[float, float, float] = (0.0, 0.6, 1.0)

Coordinate = tuple[float, float]


class BoundingBox(BaseModel):
    """Axis-aligned extent of a polygon in the projected plane (Value Object).

    Degenerate boxes (zero width or height) are allowed: a collinear
    polygon still has an extent, it just contains no interior points.
    """

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_bounds(self) -> "BoundingBox":
        if not (self.min_x <= self.max_x):
            raise ValueError(
                f"Invalid x ordering: min_x={self.min_x} > max_x={self.max_x}"
            )
        if not (self.min_y <= self.max_y):
            raise ValueError(
                f"Invalid y ordering: min_y={self.min_y} > max_y={self.max_y}"
            )
        return self


class Polygon(BaseModel):
    """Closed boundary polygon (Value Object).

    The vertex sequence is implicitly closed: the last vertex connects back
    to the first. A trailing vertex equal to the first is tolerated but not
    required.

    Invariants:
        PG-1: len(vertices) >= 3
        PG-2: every coordinate is finite
    """

    vertices: tuple[Coordinate, ...] = Field(min_length=3)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_vertices(self) -> "Polygon":
        for x, y in self.vertices:
            if not (math.isfinite(x) and math.isfinite(y)):
                raise ValueError(f"Vertex ({x}, {y}) is not finite")
        return self

    def bounding_box(self) -> BoundingBox:
        xs = [v[0] for v in self.vertices]
        ys = [v[1] for v in self.vertices]
        return BoundingBox(min_x=min(xs), max_x=max(xs), min_y=min(ys), max_y=max(ys))


class HeightSample(BaseModel):
    """Resolved grid point (Value Object).

    Invariants:
        HS-1: is_fallback == True implies z == FALLBACK_HEIGHT_M
        HS-2: z is finite
    """

    x: float
    y: float
    z: float
    is_fallback: bool = False  # True when the lookup failed

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_height(self) -> "HeightSample":
        if not math.isfinite(self.z):
            raise ValueError(f"Height must be finite, got {self.z}")
        if self.is_fallback and self.z != FALLBACK_HEIGHT_M:
            raise ValueError(
                f"is_fallback=True requires z={FALLBACK_HEIGHT_M}, got {self.z}"
            )
        return self

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


class RunSummary(BaseModel):
    """Counters collected over one grid scan (Value Object)."""

    accepted_count: int = Field(ge=0)
    total_lookups: int = Field(ge=0)
    failed_lookups: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_counts(self) -> "RunSummary":
        if self.failed_lookups > self.total_lookups:
            raise ValueError(
                f"failed_lookups ({self.failed_lookups}) exceeds "
                f"total_lookups ({self.total_lookups})"
            )
        return self

    @property
    def successful_lookups(self) -> int:
        return self.total_lookups - self.failed_lookups

    def success_rate(self) -> float:
        """Return percentage of successful lookups (0.0 when nothing was queried)."""
        if self.total_lookups == 0:
            return 0.0
        return self.successful_lookups / self.total_lookups * 100.0


class SamplingResult(BaseModel):
    """Output of one grid scan: samples in scan order plus counters."""

    samples: tuple[HeightSample, ...]
    summary: RunSummary

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_result(self) -> "SamplingResult":
        if len(self.samples) != self.summary.accepted_count:
            raise ValueError(
                f"{len(self.samples)} samples but accepted_count="
                f"{self.summary.accepted_count}"
            )
        return self

    def is_empty(self) -> bool:
        return not self.samples


class PointCloud(BaseModel):
    """Named, colored collection of height samples handed to the output sink."""

    name: str = Field(min_length=1)
    color: tuple[float, float, float] = CLOUD_COLOR
    samples: tuple[HeightSample, ...]

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_color(self) -> "PointCloud":
        if any(not (0.0 <= c <= 1.0) for c in self.color):
            raise ValueError(f"Color components must be in [0, 1], got {self.color}")
        return self

    @classmethod
    def for_spacing(
        cls, spacing: float, samples: tuple[HeightSample, ...]
    ) -> "PointCloud":
        """Build the cloud the run publishes, e.g. ``Swisstopo_Grid_Heights_2m``."""
        return cls(name=f"{CLOUD_NAME_PREFIX}{spacing:g}m", samples=samples)

    def __len__(self) -> int:
        return len(self.samples)
