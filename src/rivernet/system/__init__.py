from .evaluation import Evaluation, run
from .network import WaterNetwork
from .result import DetailedResult
from .tree import render_tree
from .validation import CycleError, RunArgumentError, ValidationError

__all__ = [
    "CycleError",
    "DetailedResult",
    "Evaluation",
    "RunArgumentError",
    "ValidationError",
    "WaterNetwork",
    "render_tree",
    "run",
]
