import networkx as nx
import numpy as np
import pytest

from rivernet.node import Dam, River
from rivernet.system import CycleError, ValidationError, WaterNetwork
from rivernet.testing import make_river

from .conftest import immediate


class TestWaterNetworkNodes:
    def test_add_river_and_dam(self):
        net = WaterNetwork()
        river = net.add_river("north", area=1.0, flow_duration=1, flow_shape=immediate)
        dam = net.add_dam("reservoir", release_policy=3.0)

        assert isinstance(river, River)
        assert isinstance(dam, Dam)
        assert len(net) == 2
        assert net["north"] is river
        assert list(net) == [river, dam]

    def test_duplicate_name_rejected(self):
        net = WaterNetwork()
        net.add_river("north", area=1.0, flow_duration=1, flow_shape=immediate)
        with pytest.raises(ValueError, match="Node 'north' already exists"):
            net.add_dam("north", release_policy=1.0)

    def test_add_node_rejects_non_nodes(self):
        with pytest.raises(TypeError, match="Expected a water node"):
            WaterNetwork().add_node("north")

    def test_contains_by_name_and_identity(self, network):
        assert "upper" in network
        assert network["upper"] in network
        assert make_river(name="upper") not in network
        assert "missing" not in network


class TestWaterNetworkConnect:
    def test_connect_by_name(self, network):
        assert network["upper"] in network["reservoir"].inflows
        assert network["reservoir"] in network["upper"].outflows

    def test_connect_by_node(self):
        net = WaterNetwork()
        a = net.add_river("a", area=1.0, flow_duration=1, flow_shape=immediate)
        b = net.add_dam("b", release_policy=1.0)
        net.connect(a, b)
        assert b.inflows == [a]

    def test_connect_unknown_name(self, network):
        with pytest.raises(ValueError, match="Node 'ghost' does not exist"):
            network.connect("ghost", "lower")

    def test_connect_foreign_node(self, network):
        stranger = make_river(name="stranger")
        with pytest.raises(ValueError, match="Node 'stranger' is not part of this network"):
            network.connect(stranger, "lower")

    def test_roots(self, network):
        assert network.roots() == [network["lower"]]


class TestWaterNetworkValidate:
    def test_valid_network(self, network):
        network.validate()

    def test_cycle_detected(self, network):
        network.connect("lower", "upper")
        with pytest.raises(CycleError, match="Cycle detected in network at"):
            network.validate()

    def test_unregistered_neighbour(self, network):
        stranger = make_river(name="stranger")
        network["upper"].add_inflow(stranger)
        with pytest.raises(ValidationError, match="Node 'upper' is connected to unregistered node 'stranger'"):
            network.validate()


class TestWaterNetworkGraph:
    def test_to_networkx(self, network):
        graph = network.to_networkx()

        assert isinstance(graph, nx.DiGraph)
        assert set(graph.nodes) == {"upper", "reservoir", "lower"}
        assert set(graph.edges) == {("upper", "reservoir"), ("reservoir", "lower")}
        assert graph.nodes["reservoir"]["kind"] == "Dam"
        assert graph.nodes["upper"]["node"] is network["upper"]


class TestWaterNetworkRun:
    def test_run_by_name(self, network):
        result = network.run("lower", 3, [10, 10, 10])
        np.testing.assert_allclose(result.outflow(network["lower"]), [25.0, 25.0, 25.0])
        np.testing.assert_allclose(result.storage(network["reservoir"]), [5.0, 10.0, 15.0])

    def test_memoized_network(self):
        net = WaterNetwork(memoize=True)
        net.add_river("a", area=1.0, flow_duration=1, flow_shape=immediate)
        net.add_river("b", area=1.0, flow_duration=1, flow_shape=immediate)
        net.connect("a", "b")
        result = net.run("b", 2, [1, 2])
        np.testing.assert_allclose(result.outflow(net["b"]), [2.0, 4.0])

    def test_tree_and_report(self, network):
        assert network.tree("lower").startswith("R: lower")
        assert "lower Outflow" in network.report("lower", 2, [1, 1])
