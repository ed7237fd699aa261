import numpy as np
import pytest

from rivernet.declare import connect, declare_dam, declare_node, declare_river, rainfall_mm
from rivernet.node import ConfigurationError, Dam, PolicyEvaluationError, River
from rivernet.system import RunArgumentError, WaterNetwork, run
from rivernet.units import Quantity


def river_props(**overrides):
    props = {"area": Quantity.of(2, "sqkm"), "flow_days": 1, "flow_shape": lambda k, d: 1.0 if k == 0 else 0.0}
    props.update(overrides)
    return props


class TestDeclareRiver:
    def test_builds_river(self):
        river = declare_river("north", river_props())
        assert isinstance(river, River)
        assert river.flow_duration == 1.0
        assert river.area == Quantity.of(2, "sqkm")

    def test_numeric_area(self):
        river = declare_river("north", river_props(area=3))
        assert river.area_on(0) == 3.0

    def test_missing_property(self):
        props = river_props()
        del props["flow_shape"]
        with pytest.raises(ConfigurationError, match="Node 'north': missing property 'flow_shape'"):
            declare_river("north", props)

    def test_unknown_property(self):
        with pytest.raises(ConfigurationError, match=r"unknown properties \['colour'\]"):
            declare_river("north", river_props(colour="blue"))

    def test_bad_area(self):
        with pytest.raises(ConfigurationError, match="property 'area'"):
            declare_river("north", river_props(area="big"))

    def test_length_area_rejected(self):
        with pytest.raises(ConfigurationError, match="Node 'north': area must be an AREA quantity"):
            declare_river("north", river_props(area=Quantity.of(2, "km")))

    def test_flow_days_must_be_number(self):
        with pytest.raises(ConfigurationError, match="property 'flow_days' must be a number"):
            declare_river("north", river_props(flow_days=Quantity.of(1, "m")))

    def test_negative_flow_days(self):
        with pytest.raises(ConfigurationError, match="Node 'north': flow_duration cannot be negative"):
            declare_river("north", river_props(flow_days=-1))


class TestDeclareDam:
    def test_builds_dam(self):
        dam = declare_dam("reservoir", {"out_flow": lambda v: v / 2})
        assert isinstance(dam, Dam)
        assert dam.requested_release(10.0) == 5.0

    def test_missing_out_flow(self):
        with pytest.raises(ConfigurationError, match="Node 'reservoir': missing property 'out_flow'"):
            declare_dam("reservoir", {})

    def test_error_names_out_flow(self):
        with pytest.raises(ConfigurationError, match="Node 'reservoir': out_flow must be"):
            declare_dam("reservoir", {"out_flow": "plenty"})

    def test_run_error_names_out_flow(self):
        dam = declare_dam("reservoir", {"out_flow": lambda v: "lots"})
        with pytest.raises(PolicyEvaluationError, match="Property 'out_flow' of node 'reservoir'") as exc_info:
            run(dam, 1, [1])
        assert exc_info.value.prop == "out_flow"


class TestDeclareNode:
    def test_kind_is_case_insensitive(self):
        assert isinstance(declare_node("River", "a", river_props()), River)
        assert isinstance(declare_node("DAM", "b", {"out_flow": 1}), Dam)

    def test_unknown_kind(self):
        with pytest.raises(ConfigurationError, match="Unknown node kind 'lake'"):
            declare_node("lake", "a", {})

    def test_registers_in_network(self):
        net = WaterNetwork()
        node = declare_node("dam", "b", {"out_flow": 1}, network=net)
        assert net["b"] is node

    def test_connect_edge_statement(self):
        upper = declare_node("river", "upper", river_props())
        lower = declare_node("dam", "lower", {"out_flow": lambda v: v})
        connect(upper, lower)
        result = run(lower, 2, rainfall_mm([5, Quantity.of(1, "cm")]))
        np.testing.assert_allclose(result.outflow(lower), [10.0, 20.0])

    def test_connect_requires_nodes(self):
        with pytest.raises(ConfigurationError, match="Connections require water nodes"):
            connect("upper", declare_node("dam", "lower", {"out_flow": 1}))


class TestRainfallMm:
    def test_numbers_and_lengths(self):
        assert rainfall_mm([1, 2.5, Quantity.of(1, "cm")]) == [1.0, 2.5, 10.0]

    def test_non_length_unit(self):
        with pytest.raises(RunArgumentError, match="Rainfall element 0 must be a length"):
            rainfall_mm([Quantity.of(1, "L")])

    def test_not_a_number(self):
        with pytest.raises(RunArgumentError, match="Rainfall element 1 is not a number or unit"):
            rainfall_mm([1, "wet"])

    def test_string_rejected(self):
        with pytest.raises(RunArgumentError):
            rainfall_mm("1,2,3")
