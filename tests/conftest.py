"""Pytest fixtures for smartarrow tests."""

import pytest

from smartarrow import Point, Rectangle, RoutingConfig, Whiteboard


@pytest.fixture
def config():
    """Default routing configuration."""
    return RoutingConfig()


@pytest.fixture
def source_rect():
    """Card on the left of the classic two-card layout."""
    return Rectangle(0, 0, 100, 50)


@pytest.fixture
def target_rect():
    """Card on the right of the classic two-card layout."""
    return Rectangle(300, 0, 100, 50)


@pytest.fixture
def blocker():
    """Card sitting on the straight line between source and target."""
    return Rectangle(150, 0, 50, 100)


@pytest.fixture
def start():
    return Point(100, 25)


@pytest.fixture
def end():
    return Point(300, 25)


@pytest.fixture
def board(source_rect, target_rect, blocker):
    """Whiteboard with two cards and a blocker between them."""
    wb = Whiteboard()
    wb.add_card("a", source_rect, label="Source")
    wb.add_card("b", target_rect, label="Target")
    wb.add_card("blocker", blocker, label="Blocker")
    return wb
