"""Command line entry point.

Usage:
    grid-heights boundary.geojson --spacing 2 --output heights.xyz

Reads one closed boundary from a GeoJSON file, samples swisstopo heights on
a regular grid inside it and writes the points as XYZ text.

Exit codes:
    0  points written, or no point inside the boundary
    1  invalid selection or spacing
    2  cancelled (argparse usage errors also exit with 2)
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from application.grid_heights import GridHeightRun, RunOutcome
from domain.sampling.value_objects import (
    DEFAULT_GRID_SPACING_M,
    MAX_GRID_SPACING_M,
    MIN_GRID_SPACING_M,
)
from infrastructure.elevation.swisstopo_adapter import (
    ATTRIBUTION,
    DEFAULT_ENDPOINT,
    SwisstopoHeightAdapter,
)
from infrastructure.host import (
    FixedSpacingSource,
    GeoJsonSelectionSource,
    LoggingNotificationSink,
    XyzFileSink,
)

_EXIT_CODES = {
    RunOutcome.COMPLETED: 0,
    RunOutcome.EMPTY: 0,
    RunOutcome.INVALID_INPUT: 1,
    RunOutcome.CANCELLED: 2,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grid-heights",
        description="Sample swisstopo heights on a grid inside a closed boundary.",
    )
    parser.add_argument("boundary", type=Path, help="GeoJSON file with one boundary")
    parser.add_argument(
        "--spacing",
        type=float,
        default=None,
        help=(
            f"Grid spacing in meters, {MIN_GRID_SPACING_M}-{MAX_GRID_SPACING_M} "
            f"(default: {DEFAULT_GRID_SPACING_M})"
        ),
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="XYZ output file (default: <boundary>_heights.xyz)",
    )
    parser.add_argument(
        "--endpoint", default=DEFAULT_ENDPOINT, help="Height service URL"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default: wait indefinitely)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log per-point details"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    output = args.output or args.boundary.with_name(
        f"{args.boundary.stem}_heights.xyz"
    )

    with SwisstopoHeightAdapter(args.endpoint, timeout=args.timeout) as resolver:
        run = GridHeightRun(
            selection=GeoJsonSelectionSource(args.boundary),
            spacing_source=FixedSpacingSource(args.spacing),
            resolver=resolver,
            sink=XyzFileSink(output),
            notifier=LoggingNotificationSink(),
            attribution=ATTRIBUTION,
        )
        outcome = run.execute()

    return _EXIT_CODES[outcome]


if __name__ == "__main__":
    raise SystemExit(main())
