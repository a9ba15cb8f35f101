"""Root pytest configuration for all tests."""

from __future__ import annotations

import pytest

from domain.sampling.value_objects import Polygon
from tests.fakes import SQUARE_10, RecordingNotifier, RecordingSink, StubResolver


@pytest.fixture
def square() -> Polygon:
    """10 x 10 square with corners (0,0), (10,0), (10,10), (0,10)."""
    return Polygon(vertices=SQUARE_10)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def sum_resolver() -> StubResolver:
    """Resolver returning z = x + y."""
    return StubResolver(lambda x, y: x + y)
