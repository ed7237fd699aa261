import pytest

from rivernet.node import add_inflow
from rivernet.system import WaterNetwork
from rivernet.testing import make_dam, make_river


def immediate(offset: float, duration: float) -> float:
    return 1.0 if offset == 0 else 0.0


def release_all(current: float) -> float:
    return current


@pytest.fixture
def diamond():
    """source feeds left and right, both feed outlet."""
    source = make_river(name="source", area=1.0, flow_shape=immediate)
    left = make_dam(name="left", release_policy=release_all)
    right = make_dam(name="right", release_policy=release_all)
    outlet = make_river(name="outlet", area=0.0, flow_shape=immediate)
    add_inflow(left, source)
    add_inflow(right, source)
    add_inflow(outlet, left)
    add_inflow(outlet, right)
    return source, left, right, outlet


@pytest.fixture
def network() -> WaterNetwork:
    net = WaterNetwork()
    net.add_river("upper", area=1.0, flow_duration=1, flow_shape=immediate)
    net.add_dam("reservoir", release_policy=lambda current: min(current, 5.0))
    net.add_river("lower", area=2.0, flow_duration=1, flow_shape=immediate)
    net.connect("upper", "reservoir")
    net.connect("reservoir", "lower")
    return net
