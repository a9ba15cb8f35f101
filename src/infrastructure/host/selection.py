"""GeoJSON selection source.

Reads boundary geometries from a GeoJSON file and presents them through the
SelectionSource port. Geometries are decoded with shapely; every Polygon
exterior ring, LineString and member of a Multi*/GeometryCollection counts as
one selected boundary. Points are ignored, polygon holes too.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict
from shapely.errors import ShapelyError
from shapely.geometry import (
    GeometryCollection,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    shape,
)
from shapely.geometry.base import BaseGeometry

from domain.sampling.errors import InvalidSelectionError
from domain.sampling.value_objects import Coordinate

logger = logging.getLogger(__name__)


class FileBoundary(BaseModel):
    """Boundary polyline read from a file (Value Object).

    A polyline is closed when it came from a polygon ring or when its first
    and last positions coincide.
    """

    positions: tuple[Coordinate, ...]
    ring: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_coords(
        cls, coords: Iterable[Sequence[float]], ring: bool = False
    ) -> "FileBoundary":
        # Coordinates may carry a z component; only x/y are used
        positions = tuple((float(c[0]), float(c[1])) for c in coords)
        return cls(positions=positions, ring=ring)

    def is_closed(self) -> bool:
        if self.ring:
            return True
        return len(self.positions) > 2 and self.positions[0] == self.positions[-1]

    def vertex_count(self) -> int:
        return len(self.positions)

    def vertex(self, index: int) -> Coordinate:
        return self.positions[index]


def _boundaries(geometry: BaseGeometry) -> Iterator[FileBoundary]:
    if isinstance(geometry, (Point, MultiPoint)):
        return
    if geometry.is_empty:
        raise InvalidSelectionError(f"Empty {geometry.geom_type} geometry")
    if isinstance(geometry, Polygon):
        yield FileBoundary.from_coords(geometry.exterior.coords, ring=True)
    elif isinstance(geometry, LinearRing):
        yield FileBoundary.from_coords(geometry.coords, ring=True)
    elif isinstance(geometry, LineString):
        yield FileBoundary.from_coords(geometry.coords)
    elif isinstance(geometry, (MultiPolygon, MultiLineString, GeometryCollection)):
        for part in geometry.geoms:
            yield from _boundaries(part)
    else:
        raise InvalidSelectionError(
            f"Unsupported geometry type: {geometry.geom_type}"
        )


def _feature_geometry(feature: Any) -> Iterator[BaseGeometry]:
    if not isinstance(feature, dict):
        raise InvalidSelectionError(f"Feature must be an object, got {feature!r}")
    if feature.get("geometry") is not None:
        yield shape(feature["geometry"])


def _geometries(document: dict[str, Any]) -> Iterator[BaseGeometry]:
    kind = document.get("type")
    if kind == "FeatureCollection":
        for feature in document["features"]:
            yield from _feature_geometry(feature)
    elif kind == "Feature":
        yield from _feature_geometry(document)
    else:
        yield shape(document)


def parse_boundaries(document: Any) -> list[FileBoundary]:
    """Extract boundaries from a decoded GeoJSON document."""
    if not isinstance(document, dict):
        raise InvalidSelectionError("GeoJSON root must be an object")
    try:
        return [b for g in _geometries(document) for b in _boundaries(g)]
    except (
        AttributeError,
        KeyError,
        IndexError,
        TypeError,
        ValueError,
        ShapelyError,
    ) as e:
        raise InvalidSelectionError(f"Malformed GeoJSON geometry: {e}") from e


class GeoJsonSelectionSource:
    """SelectionSource backed by a GeoJSON file."""

    def __init__(self, file_path: Path | str) -> None:
        self.path = Path(file_path)

    def selected_boundaries(self) -> Sequence[FileBoundary]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(
                "Failed to read %s (errno=%s, strerror=%s)",
                self.path.name,
                getattr(e, "errno", "unknown"),
                getattr(e, "strerror", "unknown"),
            )
            raise InvalidSelectionError(f"Cannot read {self.path.name}") from e

        try:
            document = json.loads(text)
        except ValueError as e:
            raise InvalidSelectionError(f"{self.path.name} is not valid JSON") from e

        boundaries = parse_boundaries(document)
        logger.debug("%s: %d boundaries", self.path.name, len(boundaries))
        return boundaries
