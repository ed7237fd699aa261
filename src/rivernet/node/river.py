import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import ClassVar

from rivernet.units import Kind, Quantity, format_number

from .base import WaterNode
from .policy import ConfigurationError, as_policy, call_policy, is_number
from .strategies import FlowShape

AreaSpec = Quantity | float | Callable[[float], float]


@dataclass(eq=False)
class River(WaterNode):
    """A catchment whose inflow and local rainfall leave over ``flow_duration`` days.

    ``area`` is an AREA quantity, a number of square kilometres, or a
    callable ``area(day)`` evaluated per simulated day. ``flow_shape`` is
    called as ``flow_shape(offset, flow_duration)`` and returns the share
    of a pulse exiting at that offset.
    """

    area: AreaSpec | None = None
    flow_duration: float | None = None
    flow_shape: FlowShape | float | None = field(default=None)

    symbol: ClassVar[str] = "R"

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.area is None:
            raise ConfigurationError("area is required")
        if isinstance(self.area, Quantity):
            if self.area.kind is not Kind.AREA:
                raise ConfigurationError(f"area must be an AREA quantity, got {self.area.kind.name}")
        elif is_number(self.area):
            self.area = Quantity.of_canonical(float(self.area), Kind.AREA)
        elif callable(self.area):
            self.area = as_policy(self.area, 1, "area")
        else:
            raise ConfigurationError(f"area must be a quantity, number or callable, got {type(self.area).__name__}")

        if self.flow_duration is None:
            raise ConfigurationError("flow_duration is required")
        if not is_number(self.flow_duration) or not math.isfinite(self.flow_duration):
            raise ConfigurationError("flow_duration must be a finite number")
        if self.flow_duration < 0:
            raise ConfigurationError("flow_duration cannot be negative")
        self.flow_duration = float(self.flow_duration)

        self.flow_shape = as_policy(self.flow_shape, 2, "flow_shape")

    @property
    def shape_span(self) -> int:
        return max(1, math.ceil(self.flow_duration))

    def area_on(self, day: int) -> float:
        """Catchment area in square kilometres on ``day``."""
        if isinstance(self.area, Quantity):
            return self.area.canonical
        return call_policy(self.area, (float(day),), "area", self.name)

    def shape_fraction(self, offset: int) -> float:
        return call_policy(self.flow_shape, (float(offset), self.flow_duration), "flow_shape", self.name)

    def label(self) -> str:
        area = str(self.area) if isinstance(self.area, Quantity) else repr(self.area)
        return (
            f"{super().label()} [ area={area}, flow_days={format_number(self.flow_duration)}, "
            f"flow_shape={self.flow_shape!r} ]"
        )
