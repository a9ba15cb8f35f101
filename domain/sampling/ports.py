"""Domain Port(s) for grid height sampling.

Defines interfaces (Protocols) that host and infrastructure adapters must
implement. No concrete I/O here.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Protocol

from .value_objects import Coordinate, PointCloud


class Severity(str, Enum):
    """Severity of a user-facing notification."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class SelectedBoundary(Protocol):
    """Geometry query surface of one selected boundary polyline."""

    def is_closed(self) -> bool: ...

    def vertex_count(self) -> int: ...

    def vertex(self, index: int) -> Coordinate: ...


class SelectionSource(Protocol):
    """Port yielding the boundaries the user selected in the host."""

    def selected_boundaries(self) -> Sequence[SelectedBoundary]: ...


class SpacingSource(Protocol):
    """Port asking the user for the grid spacing.

    Implementations raise UserCancelledError when the user dismisses the
    request.
    """

    def request_spacing(
        self, default: float, minimum: float, maximum: float
    ) -> float: ...


class HeightResolver(Protocol):
    """Port for single-point elevation lookups.

    Implementations live in infrastructure (e.g., swisstopo REST adapter).
    """

    def resolve_height(self, easting: float, northing: float) -> float | None:
        """Return the height in meters, or None if it could not be resolved.

        Must never raise for lookup failures.
        """
        ...


class PointCloudSink(Protocol):
    """Port making the resulting cloud persistent/visible in the host."""

    def publish(self, cloud: PointCloud) -> None: ...


class NotificationSink(Protocol):
    """Port displaying messages to the user. Never consulted for control flow."""

    def notify(
        self, severity: Severity, message: str, title: str | None = None
    ) -> None: ...
