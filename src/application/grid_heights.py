"""Grid height run: wires the host collaborators to the sampling service.

States:
    INITIALIZING -> SCANNING -> REPORTING -> DONE

Cancellation and invalid input end the run during INITIALIZING; it then
moves straight to DONE without touching the resolver or the output sink.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

from domain.sampling.errors import (
    InvalidSelectionError,
    InvalidSpacingError,
    UserCancelledError,
)
from domain.sampling.ports import (
    HeightResolver,
    NotificationSink,
    PointCloudSink,
    SelectionSource,
    Severity,
    SpacingSource,
)
from domain.sampling.services import (
    polygon_from_selection,
    sample_grid_heights,
    validate_spacing,
)
from domain.sampling.value_objects import (
    DEFAULT_GRID_SPACING_M,
    MAX_GRID_SPACING_M,
    MIN_GRID_SPACING_M,
    PointCloud,
    SamplingResult,
)

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    INITIALIZING = "initializing"
    SCANNING = "scanning"
    REPORTING = "reporting"
    DONE = "done"


class RunOutcome(str, Enum):
    COMPLETED = "completed"  # cloud published
    EMPTY = "empty"  # no point inside the polygon
    CANCELLED = "cancelled"
    INVALID_INPUT = "invalid_input"


def format_summary(result: SamplingResult, spacing: float) -> str:
    """Completion report shown to the user."""
    summary = result.summary
    return (
        f"Successfully created {summary.accepted_count} height points\n\n"
        f"Grid spacing: {spacing:g}m\n"
        f"API queries: {summary.total_lookups}\n"
        f"Failed queries: {summary.failed_lookups}\n"
        f"Success rate: {summary.success_rate():.1f}%"
    )


class GridHeightRun:
    """One execution of the grid height workflow.

    Parameters
    ----------
    selection, spacing_source, resolver, sink, notifier:
        Host collaborators (see domain.sampling.ports).
    attribution:
        Data-source credit lines logged once the scan has been reported.

    Attributes
    ----------
    state: RunState
        Current state; DONE after execute() returns.
    result: SamplingResult | None
        Scan result, set once SCANNING completes.
    cloud: PointCloud | None
        Published cloud, None when nothing was published.
    """

    def __init__(
        self,
        selection: SelectionSource,
        spacing_source: SpacingSource,
        resolver: HeightResolver,
        sink: PointCloudSink,
        notifier: NotificationSink,
        attribution: Sequence[str] = (),
    ) -> None:
        self.selection = selection
        self.spacing_source = spacing_source
        self.resolver = resolver
        self.sink = sink
        self.notifier = notifier
        self.attribution = tuple(attribution)
        self.state = RunState.INITIALIZING
        self.result: SamplingResult | None = None
        self.cloud: PointCloud | None = None

    def execute(self) -> RunOutcome:
        if self.state is not RunState.INITIALIZING:
            raise RuntimeError(f"Run already executed (state={self.state.value})")

        # INITIALIZING
        try:
            spacing = validate_spacing(
                self.spacing_source.request_spacing(
                    DEFAULT_GRID_SPACING_M, MIN_GRID_SPACING_M, MAX_GRID_SPACING_M
                )
            )
            polygon = polygon_from_selection(self.selection.selected_boundaries())
        except UserCancelledError:
            self.notifier.notify(Severity.INFO, "Operation cancelled by user")
            self.state = RunState.DONE
            return RunOutcome.CANCELLED
        except InvalidSelectionError as e:
            self.notifier.notify(Severity.ERROR, str(e), title="Selection Error")
            self.state = RunState.DONE
            return RunOutcome.INVALID_INPUT
        except InvalidSpacingError as e:
            self.notifier.notify(Severity.ERROR, str(e), title="Spacing Error")
            self.state = RunState.DONE
            return RunOutcome.INVALID_INPUT

        # SCANNING
        self.state = RunState.SCANNING
        logger.info("Starting grid generation with %sm spacing", f"{spacing:g}")
        self.result = sample_grid_heights(
            polygon, spacing, self.resolver, self.notifier
        )

        # REPORTING
        self.state = RunState.REPORTING
        outcome = self._report(spacing, self.result)
        for line in self.attribution:
            logger.info("%s", line)
        self.state = RunState.DONE
        return outcome

    def _report(self, spacing: float, result: SamplingResult) -> RunOutcome:
        if result.is_empty():
            self.notifier.notify(
                Severity.WARNING,
                "No points generated. Check grid spacing and polygon area.",
                title="No Results",
            )
            return RunOutcome.EMPTY

        self.cloud = PointCloud.for_spacing(spacing, result.samples)
        self.sink.publish(self.cloud)
        self.notifier.notify(
            Severity.SUCCESS,
            format_summary(result, spacing),
            title="Grid Generation Complete",
        )
        logger.info("Cloud name: %s", self.cloud.name)
        logger.info("Total points: %d", len(self.cloud))
        return RunOutcome.COMPLETED
