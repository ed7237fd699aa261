from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class NodeOutputs:
    total_out: np.ndarray  # ML per day, before splitting
    per_edge_out: np.ndarray  # ML per day received by each downstream edge
    backlog: np.ndarray  # ML stored or in transit at end of day

    @classmethod
    def split(cls, total_out: np.ndarray, backlog: np.ndarray, branches: int) -> "NodeOutputs":
        """Divide ``total_out`` evenly across ``branches`` downstream consumers."""
        branches = max(1, branches)
        per_edge = total_out / branches if branches > 1 else total_out.copy()
        return cls(total_out=total_out, per_edge_out=per_edge, backlog=backlog)
