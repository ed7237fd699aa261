import math
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class FlowShape(Protocol):
    """Fraction of a pulse leaving a river ``offset`` days after it arrived.

    Fractions over all offsets of one pulse should sum to at most 1.
    """

    def __call__(self, offset: float, duration: float) -> float: ...


@runtime_checkable
class ReleasePolicy(Protocol):
    """Volume a dam releases today given its stored plus incoming volume."""

    def __call__(self, current: float) -> float: ...


@dataclass(frozen=True)
class Constant:
    value: float

    def __call__(self, *args: float) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"{self.value:g}"


@dataclass(frozen=True)
class ImmediateShape:
    def __call__(self, offset: float, duration: float) -> float:
        return 1.0 if offset == 0 else 0.0


@dataclass(frozen=True)
class UniformShape:
    """Spread a pulse evenly across ``duration`` days; a fractional last day gets the remainder."""

    def __call__(self, offset: float, duration: float) -> float:
        if duration <= 0:
            return 1.0 if offset == 0 else 0.0
        return max(0.0, min(1.0, duration - offset)) / duration


@dataclass(frozen=True)
class RecessionShape:
    """Geometric recession: each day releases ``ratio`` times the previous day's share."""

    ratio: float = 0.5

    def __post_init__(self) -> None:
        if not 0.0 < self.ratio <= 1.0:
            raise ValueError("ratio must be in (0, 1]")

    def __call__(self, offset: float, duration: float) -> float:
        span = max(1, math.ceil(duration))
        if offset >= span:
            return 0.0
        total = sum(self.ratio**k for k in range(span))
        return self.ratio**offset / total


@dataclass(frozen=True)
class FixedRelease:
    rate: float

    def __post_init__(self) -> None:
        if self.rate < 0:
            raise ValueError("rate cannot be negative")

    def __call__(self, current: float) -> float:
        return min(current, self.rate)


@dataclass(frozen=True)
class ProportionalRelease:
    fraction: float = 0.5

    def __post_init__(self) -> None:
        if not 0.0 <= self.fraction <= 1.0:
            raise ValueError("fraction must be in [0, 1]")

    def __call__(self, current: float) -> float:
        return current * self.fraction


@dataclass(frozen=True)
class SpillAbove:
    """Keep up to ``threshold`` in storage and release everything above it."""

    threshold: float

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise ValueError("threshold cannot be negative")

    def __call__(self, current: float) -> float:
        return max(0.0, current - self.threshold)
