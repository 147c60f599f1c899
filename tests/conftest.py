import pytest

import config
from core.graph import RoadGraph
from core.polyline import PolyLine
from models.traversable import Traversable


@pytest.fixture(autouse=True)
def quiet_debug():
    """Keeps debug logging off whatever a test did to the global flag."""
    previous = config.DEBUG
    config.DEBUG = False
    yield
    config.DEBUG = previous


@pytest.fixture
def make_step():
    """Builds a straight horizontal traversable from x0 to x1."""

    def _make(name, x0, x1, y=0.0, speed=10.0):
        return Traversable(name, PolyLine([(x0, y), (x1, y)]), speed)

    return _make


@pytest.fixture
def corridor():
    """Three nodes in a row, 100m apart, with one-way lanes A -> B -> C."""
    graph = RoadGraph()
    graph.add_node("A", 0, 0)
    graph.add_node("B", 100, 0)
    graph.add_node("C", 200, 0)
    graph.add_lane("A", "B", speed_limit=10.0)
    graph.add_lane("B", "C", speed_limit=10.0)
    return graph
