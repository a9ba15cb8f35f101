"""Tests for grid generation and the sample_grid_heights scan."""

from __future__ import annotations

import math

import numpy as np
import pytest

from domain.sampling.errors import InvalidSpacingError
from domain.sampling.ports import Severity
from domain.sampling.services import (
    grid_axis,
    sample_grid_heights,
    validate_spacing,
)
from domain.sampling.value_objects import FALLBACK_HEIGHT_M, Polygon
from tests.fakes import FailEveryNth, StubResolver


# ---------------------------------------------------------------------------
# grid_axis
# ---------------------------------------------------------------------------
def test_grid_axis_includes_on_grid_far_edge():
    np.testing.assert_allclose(grid_axis(0.0, 10.0, 5.0), [0.0, 5.0, 10.0])


def test_grid_axis_excludes_off_grid_far_edge():
    np.testing.assert_allclose(grid_axis(0.0, 9.99, 5.0), [0.0, 5.0])


def test_grid_axis_count_independent_of_float_rounding():
    # 0.3 / 0.1 == 2.9999999999999996 in binary floating point
    axis = grid_axis(0.0, 0.3, 0.1)
    assert len(axis) == 4
    np.testing.assert_allclose(axis, [0.0, 0.1, 0.2, 0.3])


def test_grid_axis_lv95_origin_no_drift():
    axis = grid_axis(2600000.0, 2600100.0, 0.1)
    assert len(axis) == 1001
    assert axis[0] == 2600000.0
    assert axis[-1] == pytest.approx(2600100.0, abs=1e-6)


def test_grid_axis_degenerate_extent():
    np.testing.assert_allclose(grid_axis(3.0, 3.0, 1.0), [3.0])


def test_grid_axis_rejects_non_positive_spacing():
    with pytest.raises(ValueError):
        grid_axis(0.0, 1.0, 0.0)


# ---------------------------------------------------------------------------
# validate_spacing
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("spacing", [0.1, 2.0, 100.0])
def test_validate_spacing_accepts_range_bounds(spacing):
    assert validate_spacing(spacing) == spacing


@pytest.mark.parametrize(
    "spacing", [0.0, -1.0, 0.05, 100.5, math.nan, math.inf, "abc", None]
)
def test_validate_spacing_rejects(spacing):
    with pytest.raises(InvalidSpacingError):
        validate_spacing(spacing)


# ---------------------------------------------------------------------------
# sample_grid_heights
# ---------------------------------------------------------------------------
def test_square_spacing_5_resolves_interior_points(square, sum_resolver):
    result = sample_grid_heights(square, 5.0, sum_resolver)

    assert [s.as_tuple() for s in result.samples] == [
        (0.0, 0.0, 0.0),
        (0.0, 5.0, 5.0),
        (5.0, 0.0, 5.0),
        (5.0, 5.0, 10.0),
    ]
    assert result.summary.accepted_count == 4
    assert result.summary.total_lookups == 4
    assert result.summary.failed_lookups == 0


def test_end_to_end_spacing_10_all_lookups_succeed(square, sum_resolver):
    result = sample_grid_heights(square, 10.0, sum_resolver)

    assert [s.as_tuple() for s in result.samples] == [(0.0, 0.0, 0.0)]
    assert all(s.z == s.x + s.y for s in result.samples)
    assert not any(s.is_fallback for s in result.samples)
    assert result.summary.failed_lookups == 0
    assert result.summary.success_rate() == 100.0


def test_rejected_candidates_are_not_looked_up(square, sum_resolver):
    result = sample_grid_heights(square, 2.5, sum_resolver)

    # 5 x 5 candidates; the far row and column (x=10 or y=10) classify outside
    assert result.summary.accepted_count == 16
    assert result.summary.total_lookups == 16
    assert len(sum_resolver.calls) == 16
    assert all(x < 10.0 and y < 10.0 for x, y in sum_resolver.calls)


def test_scan_order_is_outer_x_inner_y(square, sum_resolver):
    sample_grid_heights(square, 2.5, sum_resolver)

    assert sum_resolver.calls[:5] == [
        (0.0, 0.0),
        (0.0, 2.5),
        (0.0, 5.0),
        (0.0, 7.5),
        (2.5, 0.0),
    ]


def test_failure_mix_uses_fallback_where_resolver_failed(square, notifier):
    resolver = FailEveryNth(3)

    result = sample_grid_heights(square, 2.5, resolver, notifier)

    assert resolver.failed_calls == [3, 6, 9, 12, 15]
    assert len(result.samples) == result.summary.accepted_count == 16
    for call_no, sample in enumerate(result.samples, start=1):
        if call_no in resolver.failed_calls:
            assert sample.is_fallback
            assert sample.z == FALLBACK_HEIGHT_M
        else:
            assert not sample.is_fallback
            assert sample.z == sample.x + sample.y
    assert result.summary.failed_lookups == len(resolver.failed_calls)
    assert result.summary.success_rate() == pytest.approx(11 / 16 * 100)


def test_each_failure_emits_a_warning(square, notifier):
    sample_grid_heights(square, 2.5, FailEveryNth(3), notifier)

    warnings = notifier.of(Severity.WARNING)
    assert len(warnings) == 5
    assert warnings[0] == "Using fallback height 0.0 for point E=0.00, N=5.00"


def test_all_lookups_failing_gives_zero_success_rate(square):
    result = sample_grid_heights(square, 5.0, StubResolver(lambda x, y: None))

    assert result.summary.failed_lookups == result.summary.total_lookups == 4
    assert result.summary.success_rate() == 0.0
    assert all(s.z == FALLBACK_HEIGHT_M for s in result.samples)


def test_progress_every_50_points(square, sum_resolver, notifier):
    result = sample_grid_heights(square, 1.0, sum_resolver, notifier)

    assert result.summary.accepted_count == 100
    assert notifier.of(Severity.INFO) == [
        "Progress: 50 points processed",
        "Progress: 100 points processed",
    ]


def test_no_point_inside_gives_empty_result(sum_resolver):
    # Only candidate (0, 0) is the bounding box corner, outside the triangle
    triangle = Polygon(vertices=((0.0, 5.0), (10.0, 0.0), (10.0, 10.0)))

    result = sample_grid_heights(triangle, 100.0, sum_resolver)

    assert result.is_empty()
    assert result.summary.total_lookups == 0
    assert result.summary.success_rate() == 0.0
    assert sum_resolver.calls == []


def test_invalid_spacing_raises_before_lookups(square, sum_resolver):
    with pytest.raises(InvalidSpacingError):
        sample_grid_heights(square, 0.0, sum_resolver)
    assert sum_resolver.calls == []


def test_works_without_notifier(square):
    result = sample_grid_heights(square, 5.0, FailEveryNth(2))
    assert result.summary.failed_lookups == 2
