"""Adapter between host-level declarations and the network core.

A host script declares nodes with a kind, a name and a mapping of
property values (``area``, ``flow_days``, ``flow_shape`` for rivers,
``out_flow`` for dams) and wires them with ``upstream -> downstream``
edge statements.
"""

from collections.abc import Iterable, Mapping

from rivernet.node import ConfigurationError, Dam, River, WaterNode, add_inflow
from rivernet.node.policy import is_number
from rivernet.system import RunArgumentError, WaterNetwork
from rivernet.units import Kind, Quantity

RIVER_PROPERTIES = frozenset({"area", "flow_days", "flow_shape"})
DAM_PROPERTIES = frozenset({"out_flow"})


def _require(props: Mapping[str, object], name: str, key: str) -> object:
    if key not in props or props[key] is None:
        raise ConfigurationError(f"Node '{name}': missing property '{key}'")
    return props[key]


def _check_known(props: Mapping[str, object], name: str, allowed: frozenset[str]) -> None:
    unknown = sorted(set(props) - allowed)
    if unknown:
        raise ConfigurationError(f"Node '{name}': unknown properties {unknown}")


def declare_river(name: str, props: Mapping[str, object]) -> River:
    _check_known(props, name, RIVER_PROPERTIES)
    area = _require(props, name, "area")
    if not (is_number(area) or isinstance(area, Quantity) or callable(area)):
        raise ConfigurationError(f"Node '{name}': property 'area' must be a number, a unit or a 1 argument function")
    flow_days = _require(props, name, "flow_days")
    if isinstance(flow_days, Quantity) or not is_number(flow_days):
        raise ConfigurationError(f"Node '{name}': property 'flow_days' must be a number")
    flow_shape = _require(props, name, "flow_shape")
    try:
        return River(name=name, area=area, flow_duration=flow_days, flow_shape=flow_shape)
    except ConfigurationError as exc:
        raise ConfigurationError(f"Node '{name}': {exc}") from exc


def declare_dam(name: str, props: Mapping[str, object]) -> Dam:
    _check_known(props, name, DAM_PROPERTIES)
    out_flow = _require(props, name, "out_flow")
    try:
        return Dam(name=name, release_policy=out_flow, policy_property="out_flow")
    except ConfigurationError as exc:
        raise ConfigurationError(f"Node '{name}': {exc}") from exc


def declare_node(
    kind: str,
    name: str,
    props: Mapping[str, object],
    network: WaterNetwork | None = None,
) -> WaterNode:
    match kind.lower():
        case "river":
            node = declare_river(name, props)
        case "dam":
            node = declare_dam(name, props)
        case _:
            raise ConfigurationError(f"Unknown node kind '{kind}'")
    if network is not None:
        network.add_node(node)
    return node


def connect(upstream: object, downstream: object) -> None:
    """Edge statement ``upstream -> downstream``."""
    if not isinstance(upstream, WaterNode) or not isinstance(downstream, WaterNode):
        raise ConfigurationError("Connections require water nodes")
    add_inflow(downstream, upstream)


def rainfall_mm(values: Iterable[object]) -> list[float]:
    """Convert host rainfall values (numbers in mm or LENGTH quantities) to millimetres."""
    if values is None or isinstance(values, (str, bytes)):
        raise RunArgumentError("Expected a list of numbers")
    out: list[float] = []
    for i, value in enumerate(values):
        if isinstance(value, Quantity):
            if value.kind is not Kind.LENGTH:
                raise RunArgumentError(f"Rainfall element {i} must be a length, got {value.kind.name}")
            out.append(value.canonical)
        elif is_number(value):
            out.append(float(value))
        else:
            raise RunArgumentError(f"Rainfall element {i} is not a number or unit")
    return out
