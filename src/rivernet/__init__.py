"""
rivernet

Day-by-day simulation of rainfall propagating through a network of rivers
and dams.

Rivers turn local rainfall (mm over their catchment area) and upstream
inflow into outflow spread across the following days by a flow shape.
Dams hold water and release it according to a release policy. Outflow of
a node feeding several downstream nodes is split evenly between them.

Classes:
    Quantity: A length, area or volume in canonical units.
    River: Catchment node with a flow-shape policy.
    Dam: Storage node with a release policy.
    WaterNetwork: Registry owning the nodes of one network.
    DetailedResult: Per-node outflow and storage series of a run.
"""

from .node import (
    ConfigurationError,
    Dam,
    FixedRelease,
    ImmediateShape,
    PolicyEvaluationError,
    ProportionalRelease,
    RecessionShape,
    River,
    SpillAbove,
    UniformShape,
    WaterNode,
    add_inflow,
)
from .report import render_report
from .system import CycleError, DetailedResult, RunArgumentError, ValidationError, WaterNetwork, run
from .units import Kind, Quantity, Unit, UnitKindError, UnknownUnitError

__all__ = [
    "ConfigurationError",
    "CycleError",
    "Dam",
    "DetailedResult",
    "FixedRelease",
    "ImmediateShape",
    "Kind",
    "PolicyEvaluationError",
    "ProportionalRelease",
    "Quantity",
    "RecessionShape",
    "River",
    "RunArgumentError",
    "SpillAbove",
    "UniformShape",
    "Unit",
    "UnitKindError",
    "UnknownUnitError",
    "ValidationError",
    "WaterNetwork",
    "WaterNode",
    "add_inflow",
    "render_report",
    "run",
]

__version__ = "0.1.0"
