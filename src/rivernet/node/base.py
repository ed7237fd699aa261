import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

import numpy as np

from .policy import ConfigurationError

if TYPE_CHECKING:
    from rivernet.system.result import DetailedResult

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class WaterNode:
    """A named point of the network; compared and hashed by identity."""

    name: str
    inflows: list["WaterNode"] = field(default_factory=list, init=False, repr=False)
    outflows: list["WaterNode"] = field(default_factory=list, init=False, repr=False)

    symbol: ClassVar[str] = "N"

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ConfigurationError("name must be a non-empty string")

    def add_inflow(self, upstream: "WaterNode") -> None:
        add_inflow(self, upstream)

    def downstream_count(self) -> int:
        return len(self.outflows)

    def label(self) -> str:
        return f"{self.symbol}: {self.name}"

    def tree(self) -> str:
        from rivernet.system.tree import render_tree

        return render_tree(self)

    def calculate_detailed(
        self, days: int, rainfall: Sequence[float], *, memoize: bool = False
    ) -> "DetailedResult":
        from rivernet.system.evaluation import run

        return run(self, days, rainfall, memoize=memoize)

    def calculate(self, days: int, rainfall: Sequence[float], *, memoize: bool = False) -> np.ndarray:
        """Daily outflow of this node, before splitting across downstream edges."""
        result = self.calculate_detailed(days, rainfall, memoize=memoize)
        return result.outflow(self)

    def report(self, days: int, rainfall: Sequence[float]) -> str:
        from rivernet.report import render_report

        return render_report(self.calculate_detailed(days, rainfall), self)


def add_inflow(downstream: WaterNode | None, upstream: WaterNode | None) -> None:
    """Register ``upstream`` as feeding ``downstream`` and record the back-link."""
    if downstream is None:
        raise ConfigurationError("downstream node is required")
    if upstream is None:
        raise ConfigurationError("upstream node is required")
    if not isinstance(downstream, WaterNode) or not isinstance(upstream, WaterNode):
        raise ConfigurationError("Connections require water nodes")
    downstream.inflows.append(upstream)
    upstream.outflows.append(downstream)
    logger.debug(f"Connected '{upstream.name}' -> '{downstream.name}'")


def downstream_count(node: WaterNode) -> int:
    return node.downstream_count()
