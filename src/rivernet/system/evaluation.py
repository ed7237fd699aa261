"""Day-by-day propagation of rainfall through a network of rivers and dams.

Evaluation is a depth-first walk from the queried root: every inflow is
evaluated before the node consuming it. A node is "active" from the moment
its evaluation starts until it completes, so reaching an active node again
means the graph has a cycle. Nodes shared by several downstream paths are
evaluated once per path unless ``memoize`` is set.
"""

import logging
import math
import numbers
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np

from rivernet.node import Dam, NodeOutputs, River, WaterNode
from rivernet.node.policy import is_number

from .result import DetailedResult
from .validation import CycleError, RunArgumentError

logger = logging.getLogger(__name__)


def _check_days(days: object) -> int:
    if isinstance(days, bool) or not is_number(days):
        raise RunArgumentError(f"days must be an integer, got {type(days).__name__}")
    if not isinstance(days, numbers.Integral):
        if not math.isfinite(days) or not float(days).is_integer():
            raise RunArgumentError(f"days must be a whole number, got {days}")
    if days < 0:
        raise RunArgumentError(f"days cannot be negative, got {days}")
    return int(days)


def _check_rainfall(rainfall: object) -> np.ndarray:
    if rainfall is None:
        raise RunArgumentError("rainfall is required")
    if isinstance(rainfall, (str, bytes)) or not isinstance(rainfall, Iterable):
        raise RunArgumentError("rainfall must be a sequence of numbers")
    values = list(rainfall)
    for i, value in enumerate(values):
        if not is_number(value):
            raise RunArgumentError(f"Rainfall element {i} is not a number")
        if not math.isfinite(value):
            raise RunArgumentError(f"Rainfall element {i} is not finite")
        if value < 0:
            raise RunArgumentError(f"Rainfall element {i} is negative")
    return np.asarray(values, dtype=float)


@dataclass
class Evaluation:
    """State of a single run; never shared between runs."""

    days: int
    rainfall: np.ndarray
    memoize: bool = False
    result: DetailedResult = field(init=False)
    evaluated: int = field(default=0, init=False)
    _active: set[WaterNode] = field(default_factory=set, init=False, repr=False)
    _cache: dict[WaterNode, NodeOutputs] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.result = DetailedResult(days=self.days)

    def evaluate(self, node: WaterNode) -> NodeOutputs:
        if self.memoize and node in self._cache:
            logger.debug(f"Reusing outputs of '{node.name}'")
            return self._cache[node]
        if node in self._active:
            raise CycleError(node)

        self._active.add(node)
        try:
            upstream = [self.evaluate(inflow) for inflow in node.inflows]
            incoming = self._sum_upstream(upstream)

            match node:
                case River():
                    total_out, backlog = self._route_river(node, incoming)
                case Dam():
                    total_out, backlog = self._operate_dam(node, incoming)
                case _:
                    raise TypeError(f"Unsupported node kind: {type(node).__name__}")
        finally:
            self._active.discard(node)

        self.evaluated += 1
        logger.debug(f"Evaluated '{node.name}' over {self.days} days")
        self.result.record(node, total_out, backlog)
        outputs = NodeOutputs.split(total_out, backlog, node.downstream_count())
        if self.memoize:
            self._cache[node] = outputs
        return outputs

    def _sum_upstream(self, upstream: list[NodeOutputs]) -> np.ndarray:
        incoming = np.zeros(self.days)
        for outputs in upstream:
            n = min(self.days, len(outputs.per_edge_out))
            incoming[:n] += outputs.per_edge_out[:n]
        return incoming

    def _route_river(self, river: River, upstream: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        days = self.days
        span = river.shape_span
        total_out = np.zeros(days)
        backlog = np.zeros(days)
        in_transit = 0.0

        for day in range(days):
            # scheduled for today by earlier days' pulses
            prev_due = total_out[day]

            incoming = upstream[day]
            if day < len(self.rainfall):
                # mm over sqkm is ML
                incoming += self.rainfall[day] * river.area_on(day)
            incoming = max(0.0, incoming)

            released = 0.0
            for k in range(span):
                idx = day + k
                if idx >= days:
                    break
                frac = min(1.0, max(0.0, river.shape_fraction(k)))
                frac = min(frac, max(0.0, 1.0 - released))
                released += frac

                amount = incoming * frac
                total_out[idx] += amount
                if k > 0:
                    in_transit += amount

            in_transit = max(0.0, in_transit - prev_due)
            backlog[day] = in_transit

        return total_out, backlog

    def _operate_dam(self, dam: Dam, incoming: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        total_out = np.zeros(self.days)
        backlog = np.zeros(self.days)
        stored = 0.0

        for day in range(self.days):
            current = stored + incoming[day]
            requested = dam.requested_release(current)
            released = max(0.0, min(requested, current))
            total_out[day] = released
            stored = current - released
            backlog[day] = stored

        return total_out, backlog


def run(root: WaterNode, days: int, rainfall: Sequence[float], *, memoize: bool = False) -> DetailedResult:
    """Simulate ``days`` days of ``rainfall`` (mm per day) from ``root`` upstream.

    Raises:
        RunArgumentError: if ``days`` or ``rainfall`` are invalid.
        CycleError: if a node is reached while it is still being evaluated.
        PolicyEvaluationError: if a flow shape, area or release policy returns a non-number.
    """
    if not isinstance(root, WaterNode):
        raise RunArgumentError(f"root must be a water node, got {type(root).__name__}")
    days = _check_days(days)
    rain = _check_rainfall(rainfall)

    logger.info(f"Running '{root.name}' for {days} days with {len(rain)} days of rainfall")
    evaluation = Evaluation(days=days, rainfall=rain, memoize=memoize)
    evaluation.evaluate(root)
    logger.info(
        f"Run of '{root.name}' finished: {len(evaluation.result.nodes)} nodes, {evaluation.evaluated} evaluations"
    )
    return evaluation.result
