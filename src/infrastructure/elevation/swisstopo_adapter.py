"""swisstopo REST adapter for the HeightResolver port.

Queries the federal height service (api3.geo.admin.ch) for single LV95
coordinates using requests and returns plain floats.

Lifecycle of one lookup:
1) GET endpoint?easting=..&northing=..&sr=2056&format=json (blocking)
2) Reject transport errors and non-2xx statuses
3) Keep the body in memory; reject empty bodies
4) Decode JSON; require an object with a numeric `height`
5) Return the height, or None after logging the failure

No retry. Nothing is written to disk.
"""

from __future__ import annotations

import logging
import math
from types import TracebackType
from typing import Any

import requests

from domain.sampling.errors import HeightLookupError

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api3.geo.admin.ch/rest/services/height"
SPATIAL_REFERENCE = 2056  # LV95
RESPONSE_FORMAT = "json"

ATTRIBUTION = (
    "© swisstopo - Swiss Federal Office of Topography",
    "Height data retrieved from api3.geo.admin.ch",
    "Coordinate system: LV95 (EPSG:2056)",
)


def _parse_height(value: Any) -> float:
    """Convert the `height` field to a finite float.

    The live service returns heights as strings ("1234.5"); plain numbers are
    accepted too. Booleans, null, non-numeric text and non-finite values are
    rejected with ValueError.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"height is not numeric: {value!r}")
    try:
        height = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"height is not numeric: {value!r}") from e
    if not math.isfinite(height):
        raise ValueError(f"height is not finite: {value!r}")
    return height


class SwisstopoHeightAdapter:
    """Infrastructure adapter resolving heights via the swisstopo REST API.

    Parameters
    ----------
    endpoint: str
        Height service URL.
    timeout: float | None
        Seconds to wait for the service. None waits indefinitely.
    session: requests.Session | None
        Session to send requests through. When omitted the adapter creates
        and owns one; use the adapter as a context manager to close it.
    spatial_reference: int
        EPSG code passed as `sr`.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
        spatial_reference: int = SPATIAL_REFERENCE,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.spatial_reference = spatial_reference
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def __enter__(self) -> "SwisstopoHeightAdapter":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def resolve_height(self, easting: float, northing: float) -> float | None:
        """Return the height at (easting, northing), or None on any failure."""
        try:
            height = self.fetch_height(easting, northing)
        except HeightLookupError as e:
            logger.warning("%s", e)
            return None
        logger.debug("E=%.2f, N=%.2f: %.2f m", easting, northing, height)
        return height

    def fetch_height(self, easting: float, northing: float) -> float:
        """Query the service for one coordinate.

        Raises:
            HeightLookupError: On transport, HTTP, body or payload failures.
        """
        coordinate = (easting, northing)
        params = {
            "easting": easting,
            "northing": northing,
            "sr": self.spatial_reference,
            "format": RESPONSE_FORMAT,
        }

        try:
            response = self.session.get(
                self.endpoint, params=params, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise HeightLookupError(
                coordinate, f"request failed ({e.__class__.__name__})"
            ) from e

        if not response.content or not response.content.strip():
            raise HeightLookupError(coordinate, "empty response body")

        try:
            payload = response.json()
        except ValueError as e:
            # requests.JSONDecodeError subclasses ValueError
            raise HeightLookupError(coordinate, "response is not valid JSON") from e

        if not isinstance(payload, dict):
            raise HeightLookupError(
                coordinate, f"unexpected response type {type(payload).__name__}"
            )
        if "height" not in payload:
            raise HeightLookupError(coordinate, "response has no height field")

        try:
            return _parse_height(payload["height"])
        except ValueError as e:
            raise HeightLookupError(coordinate, str(e)) from e
