from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rivernet.node import WaterNode


class ValidationError(Exception):
    pass


class CycleError(ValidationError):
    """Raised when a node is reached again while it is still being evaluated."""

    def __init__(self, node: "WaterNode"):
        self.node = node
        super().__init__(f"Cycle detected in network at {node.name}")


class RunArgumentError(ValueError):
    """Raised when a run is requested with an invalid day count or rainfall series."""

    pass
