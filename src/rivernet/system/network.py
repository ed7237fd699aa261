import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import networkx as nx

from rivernet.node import Dam, FlowShape, ReleasePolicy, River, WaterNode, add_inflow
from rivernet.node.river import AreaSpec

from .evaluation import run
from .result import DetailedResult
from .tree import render_tree
from .validation import CycleError, ValidationError

if TYPE_CHECKING:
    import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)

NodeRef = WaterNode | str


@dataclass
class WaterNetwork:
    """Owns every node declared during one script execution."""

    memoize: bool = False
    _nodes: dict[str, WaterNode] = field(default_factory=dict, init=False, repr=False)

    def add_node(self, node: WaterNode) -> WaterNode:
        if not isinstance(node, WaterNode):
            raise TypeError(f"Expected a water node, got {type(node).__name__}")
        if node.name in self._nodes:
            raise ValueError(f"Node '{node.name}' already exists")
        self._nodes[node.name] = node
        return node

    def add_river(
        self, name: str, area: AreaSpec, flow_duration: float, flow_shape: FlowShape | float
    ) -> River:
        return self.add_node(River(name=name, area=area, flow_duration=flow_duration, flow_shape=flow_shape))

    def add_dam(self, name: str, release_policy: ReleasePolicy | float) -> Dam:
        return self.add_node(Dam(name=name, release_policy=release_policy))

    @property
    def nodes(self) -> dict[str, WaterNode]:
        return self._nodes

    def __getitem__(self, name: str) -> WaterNode:
        return self._nodes[name]

    def __contains__(self, ref: object) -> bool:
        if isinstance(ref, WaterNode):
            return self._nodes.get(ref.name) is ref
        return ref in self._nodes

    def __iter__(self) -> Iterator[WaterNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def _resolve(self, ref: NodeRef) -> WaterNode:
        if isinstance(ref, str):
            if ref not in self._nodes:
                raise ValueError(f"Node '{ref}' does not exist")
            return self._nodes[ref]
        if ref not in self:
            name = getattr(ref, "name", ref)
            raise ValueError(f"Node '{name}' is not part of this network")
        return ref

    def connect(self, upstream: NodeRef, downstream: NodeRef) -> None:
        add_inflow(self._resolve(downstream), self._resolve(upstream))

    def roots(self) -> list[WaterNode]:
        """Nodes without downstream consumers, in declaration order."""
        return [node for node in self._nodes.values() if node.downstream_count() == 0]

    def to_networkx(self) -> nx.DiGraph:
        graph = nx.DiGraph()
        for name, node in self._nodes.items():
            graph.add_node(name, kind=type(node).__name__, node=node)
        for node in self._nodes.values():
            for upstream in node.inflows:
                graph.add_edge(upstream.name, node.name)
        return graph

    def validate(self) -> None:
        errors: list[str] = []

        # 1. Every connected node must be registered here
        for name, node in self._nodes.items():
            for other in [*node.inflows, *node.outflows]:
                if other not in self:
                    errors.append(f"Node '{name}' is connected to unregistered node '{other.name}'")

        if errors:
            raise ValidationError("\n".join(errors))

        # 2. Check acyclic
        try:
            cycle = nx.find_cycle(self.to_networkx())
        except nx.NetworkXNoCycle:
            return
        path = " -> ".join([u for u, _ in cycle] + [cycle[0][0]])
        logger.debug(f"Cycle found: {path}")
        raise CycleError(self._nodes[cycle[0][0]])

    def run(self, root: NodeRef, days: int, rainfall: Sequence[float]) -> DetailedResult:
        return run(self._resolve(root), days, rainfall, memoize=self.memoize)

    def report(self, root: NodeRef, days: int, rainfall: Sequence[float]) -> str:
        from rivernet.report import render_report

        node = self._resolve(root)
        return render_report(self.run(node, days, rainfall), node)

    def tree(self, root: NodeRef) -> str:
        return render_tree(self._resolve(root))

    def visualize(
        self,
        save_to: str | Path | None = None,
        figsize: tuple[float, float] = (12, 8),
        title: str | None = None,
    ) -> tuple["plt.Figure", "plt.Axes"]:
        from ._visualize import visualize_network

        return visualize_network(self, save_to=save_to, figsize=figsize, title=title)
