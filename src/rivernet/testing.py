from collections.abc import Callable

from rivernet.node import Dam, FixedRelease, ImmediateShape, River, WaterNode, add_inflow
from rivernet.units import Quantity


def make_river(
    name: str = "river",
    area: Quantity | float | Callable[[float], float] = 1.0,
    flow_duration: float = 1.0,
    flow_shape: Callable[[float, float], float] | float | None = None,
) -> River:
    if flow_shape is None:
        flow_shape = ImmediateShape()
    return River(name=name, area=area, flow_duration=flow_duration, flow_shape=flow_shape)


def make_dam(
    name: str = "dam",
    release_policy: Callable[[float], float] | float | None = None,
) -> Dam:
    if release_policy is None:
        release_policy = FixedRelease(rate=5.0)
    return Dam(name=name, release_policy=release_policy)


def chain(*nodes: WaterNode) -> WaterNode:
    """Wire ``nodes`` upstream to downstream and return the last one."""
    for upstream, downstream in zip(nodes, nodes[1:]):
        add_inflow(downstream, upstream)
    return nodes[-1]
