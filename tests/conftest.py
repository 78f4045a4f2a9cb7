"""Pytest configuration and shared fixtures for VectorFlow tests."""

import pytest

from vectorflow import Artboard, Container, Obstacle, Rectangle


@pytest.fixture
def artboard():
    """Default 800 x 600 artboard."""
    return Artboard()


@pytest.fixture
def auto_artboard():
    """Artboard sized from its content."""
    return Artboard(width="auto", height="auto")


@pytest.fixture
def vertical_stack():
    """Vertical stack with 20 units between children."""
    return Container(direction="stack-vertical", spacing=20)


@pytest.fixture
def horizontal_stack():
    """Horizontal stack with 10 units between children."""
    return Container(direction="stack-horizontal", spacing=10)


@pytest.fixture
def freeform():
    """Empty freeform container."""
    return Container(direction="freeform")


@pytest.fixture
def box():
    """A plain 100 x 50 rectangle."""
    return Rectangle(100, 50, style={"fill": "#eeeeee"})


@pytest.fixture
def wall():
    """Tall obstacle between x=0 and x=200 at x=100."""
    return Obstacle(90, -100, 20, 200)
