from .base import WaterNode, add_inflow, downstream_count
from .dam import Dam
from .outputs import NodeOutputs
from .policy import ConfigurationError, PolicyEvaluationError, as_policy, call_policy
from .river import River
from .strategies import (
    Constant,
    FixedRelease,
    FlowShape,
    ImmediateShape,
    ProportionalRelease,
    RecessionShape,
    ReleasePolicy,
    SpillAbove,
    UniformShape,
)

__all__ = [
    # Errors
    "ConfigurationError",
    "PolicyEvaluationError",
    # Policies
    "as_policy",
    "call_policy",
    # Strategies
    "Constant",
    "FixedRelease",
    "FlowShape",
    "ImmediateShape",
    "ProportionalRelease",
    "RecessionShape",
    "ReleasePolicy",
    "SpillAbove",
    "UniformShape",
    # Nodes
    "Dam",
    "NodeOutputs",
    "River",
    "WaterNode",
    "add_inflow",
    "downstream_count",
]
