"""Sampling Bounded Context - Domain Services.

Pure domain logic for grid height sampling: point-in-polygon classification,
grid generation and the scan that enriches grid points with heights.
NO I/O operations - height lookups go through the HeightResolver port,
implemented by `src/infrastructure/elevation/swisstopo_adapter.py`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from domain.sampling.errors import InvalidSelectionError, InvalidSpacingError
from domain.sampling.ports import (
    HeightResolver,
    NotificationSink,
    SelectedBoundary,
    Severity,
)
from domain.sampling.value_objects import (
    FALLBACK_HEIGHT_M,
    MAX_GRID_SPACING_M,
    MIN_GRID_SPACING_M,
    HeightSample,
    Polygon,
    RunSummary,
    SamplingResult,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
INTERCEPT_EPSILON = 1e-12  # Keeps horizontal edges from dividing by zero
GRID_STEP_TOLERANCE = 1e-9  # In units of one step; keeps on-grid far edges
PROGRESS_INTERVAL = 50  # Accepted points between progress notifications


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------
def is_inside(polygon: Polygon, x: float, y: float) -> bool:
    """Even-odd ray casting test.

    Each vertex is paired with its predecessor (wrapping around). An edge
    that straddles the horizontal line through y toggles the result when the
    point lies left of the edge's intercept.

    Points exactly on the boundary have implementation-defined results.
    """
    vertices = polygon.vertices
    inside = False
    xj, yj = vertices[-1]
    for xi, yi in vertices:
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (
            yj - yi + INTERCEPT_EPSILON
        ) + xi:
            inside = not inside
        xj, yj = xi, yi
    return inside


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------
def validate_spacing(
    spacing: float,
    minimum: float = MIN_GRID_SPACING_M,
    maximum: float = MAX_GRID_SPACING_M,
) -> float:
    """Return spacing as float if it is finite and within [minimum, maximum]."""
    try:
        value = float(spacing)
    except (TypeError, ValueError) as e:
        raise InvalidSpacingError(spacing, minimum, maximum) from e
    if not math.isfinite(value) or value <= 0 or not (minimum <= value <= maximum):
        raise InvalidSpacingError(value, minimum, maximum)
    return value


def polygon_from_selection(boundaries: Sequence[SelectedBoundary]) -> Polygon:
    """Build the boundary Polygon from the host selection.

    Raises:
        InvalidSelectionError: If not exactly one boundary is selected, it is
            not closed, or it has fewer than 3 distinct vertices.
    """
    if len(boundaries) != 1:
        raise InvalidSelectionError(
            f"Please select exactly one polyline (got {len(boundaries)})"
        )

    boundary = boundaries[0]
    if not boundary.is_closed():
        raise InvalidSelectionError("The selected polyline must be closed")

    vertices = [
        (float(x), float(y))
        for x, y in (boundary.vertex(i) for i in range(boundary.vertex_count()))
    ]
    # Closed polylines often repeat the first vertex at the end
    if len(vertices) > 1 and vertices[0] == vertices[-1]:
        vertices.pop()

    if len(set(vertices)) < 3:
        raise InvalidSelectionError(
            f"The selected polyline needs at least 3 distinct vertices "
            f"(got {len(set(vertices))})"
        )

    try:
        return Polygon(vertices=tuple(vertices))
    except ValueError as e:
        raise InvalidSelectionError(str(e)) from e


# ---------------------------------------------------------------------------
# Grid generation
# ---------------------------------------------------------------------------
def grid_axis(start: float, stop: float, spacing: float) -> NDArray[np.float64]:
    """Return grid coordinates start, start + spacing, ... up to stop.

    Coordinates are computed from integer step indices, so the count never
    depends on accumulated rounding. A far edge lying on the grid (within
    GRID_STEP_TOLERANCE of a step) is included.
    """
    if spacing <= 0:
        raise ValueError("spacing must be positive")
    steps = int(math.floor((stop - start) / spacing + GRID_STEP_TOLERANCE))
    return start + np.arange(max(steps, 0) + 1, dtype=np.float64) * spacing


# ---------------------------------------------------------------------------
# Main Service: sample_grid_heights
# ---------------------------------------------------------------------------
def sample_grid_heights(
    polygon: Polygon,
    spacing: float,
    resolver: HeightResolver,
    notifier: NotificationSink | None = None,
) -> SamplingResult:
    """Scan the polygon's bounding box and resolve heights for inside points.

    Scan order is outer x, inner y. Every accepted point issues exactly one
    lookup; failed lookups fall back to FALLBACK_HEIGHT_M and are counted.

    Args:
        polygon: Boundary to sample
        spacing: Grid spacing in meters (validated against the allowed range)
        resolver: Height lookup port; returns None on failure
        notifier: Optional user-facing notification sink

    Returns:
        SamplingResult with samples in scan order and the run counters

    Raises:
        InvalidSpacingError: If spacing is not finite or out of range

    Example:
        >>> square = Polygon(vertices=((0, 0), (10, 0), (10, 10), (0, 10)))
        >>> result = sample_grid_heights(square, 5.0, resolver)
        >>> [s.as_tuple()[:2] for s in result.samples]
        [(0.0, 0.0), (0.0, 5.0), (5.0, 0.0), (5.0, 5.0)]
    """
    spacing = validate_spacing(spacing)

    bbox = polygon.bounding_box()
    logger.info(
        "Bounding box: X(%.2f - %.2f), Y(%.2f - %.2f)",
        bbox.min_x,
        bbox.max_x,
        bbox.min_y,
        bbox.max_y,
    )
    xs = grid_axis(bbox.min_x, bbox.max_x, spacing).tolist()
    ys = grid_axis(bbox.min_y, bbox.max_y, spacing).tolist()
    logger.debug("Grid: %d x %d candidates", len(xs), len(ys))

    samples: list[HeightSample] = []
    total_lookups = 0
    failed_lookups = 0

    for x in xs:
        for y in ys:
            if not is_inside(polygon, x, y):
                continue

            total_lookups += 1
            height = resolver.resolve_height(x, y)

            if height is None:
                failed_lookups += 1
                sample = HeightSample(x=x, y=y, z=FALLBACK_HEIGHT_M, is_fallback=True)
                if notifier is not None:
                    notifier.notify(
                        Severity.WARNING,
                        f"Using fallback height {FALLBACK_HEIGHT_M} for point "
                        f"E={x:.2f}, N={y:.2f}",
                    )
            else:
                sample = HeightSample(x=x, y=y, z=height)

            samples.append(sample)

            if notifier is not None and len(samples) % PROGRESS_INTERVAL == 0:
                notifier.notify(
                    Severity.INFO, f"Progress: {len(samples)} points processed"
                )

    summary = RunSummary(
        accepted_count=len(samples),
        total_lookups=total_lookups,
        failed_lookups=failed_lookups,
    )
    logger.debug(
        "Scan finished: %d points, %d lookups, %d failed",
        summary.accepted_count,
        summary.total_lookups,
        summary.failed_lookups,
    )
    return SamplingResult(samples=tuple(samples), summary=summary)
