from dataclasses import dataclass, field
from datetime import date

import numpy as np
import pandas as pd

from rivernet.node import River, WaterNode

SERIES_KINDS = ("outflow", "storage", "accumulated")


@dataclass
class DetailedResult:
    """Per-node daily series of one run, in megalitres.

    Covers every node touched while evaluating the root, not only the root.
    """

    days: int
    total_out_by_node: dict[WaterNode, np.ndarray] = field(default_factory=dict)
    volume_by_node: dict[WaterNode, np.ndarray] = field(default_factory=dict)

    def record(self, node: WaterNode, total_out: np.ndarray, backlog: np.ndarray) -> None:
        self.total_out_by_node[node] = total_out
        self.volume_by_node[node] = backlog

    @property
    def nodes(self) -> list[WaterNode]:
        return list(self.total_out_by_node)

    def __contains__(self, node: object) -> bool:
        return node in self.total_out_by_node

    def outflow(self, node: WaterNode) -> np.ndarray:
        return self.total_out_by_node.get(node, np.zeros(self.days))

    def storage(self, node: WaterNode) -> np.ndarray:
        return self.volume_by_node.get(node, np.zeros(self.days))

    def accumulated(self, node: WaterNode) -> np.ndarray:
        return np.cumsum(self.outflow(node))

    def rivers(self) -> list[River]:
        return sorted((n for n in self.volume_by_node if isinstance(n, River)), key=lambda n: n.name)

    def series(self, node: WaterNode, kind: str = "outflow") -> np.ndarray:
        match kind:
            case "outflow":
                return self.outflow(node)
            case "storage":
                return self.storage(node)
            case "accumulated":
                return self.accumulated(node)
        raise ValueError(f"Unknown series kind '{kind}', expected one of {SERIES_KINDS}")

    def to_dataframe(self, kind: str = "outflow", start: date | None = None) -> pd.DataFrame:
        """One column per node name, one row per simulated day."""
        nodes = self.nodes
        columns = [self.series(node, kind) for node in nodes]
        data = np.column_stack(columns) if columns else np.empty((self.days, 0))
        if start is None:
            index = pd.RangeIndex(self.days, name="day")
        else:
            index = pd.date_range(start=start, periods=self.days, freq="D", name="date")
        return pd.DataFrame(data, index=index, columns=[node.name for node in nodes])
