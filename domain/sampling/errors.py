"""Sampling Bounded Context - Error Hierarchy.

Custom exceptions for grid height sampling.

Only cancellation and invalid input abort a run. Per-point lookup failures
are recovered inside the height adapter and never reach the grid driver.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.sampling.value_objects import Coordinate


class SamplingError(Exception):
    """Base error for grid sampling operations."""


class UserCancelledError(SamplingError):
    """The spacing dialog was dismissed without confirmation."""


class InvalidSelectionError(SamplingError):
    """Selection is not exactly one closed boundary with >= 3 vertices."""


class InvalidSpacingError(SamplingError):
    """Grid spacing is not finite or outside the configured range.

    Attributes:
        spacing: The offending value
        minimum: Lower bound (inclusive)
        maximum: Upper bound (inclusive)
    """

    def __init__(self, spacing: float, minimum: float, maximum: float) -> None:
        self.spacing = spacing
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Grid spacing {spacing} m outside allowed range "
            f"[{minimum} m, {maximum} m]"
        )


# ---------------------------------------------------------------------------
# Height lookup (recovered locally, never propagated out of the adapter)
# ---------------------------------------------------------------------------
class HeightLookupError(SamplingError):
    """Height lookup for a single coordinate failed.

    Attributes:
        coordinate: (easting, northing) that was queried
        reason: Short description of the failure
    """

    def __init__(self, coordinate: "Coordinate", reason: str) -> None:
        self.coordinate = coordinate
        self.reason = reason
        super().__init__(
            f"Height lookup failed for E={coordinate[0]:.2f}, "
            f"N={coordinate[1]:.2f}: {reason}"
        )
