from dataclasses import dataclass, field
from typing import ClassVar

from .base import WaterNode
from .policy import as_policy, call_policy
from .strategies import ReleasePolicy


@dataclass(eq=False)
class Dam(WaterNode):
    """Storage released according to ``release_policy(current_volume)``.

    ``policy_property`` is the name errors use for the release policy, so a
    host that calls it ``out_flow`` sees its own name.
    """

    release_policy: ReleasePolicy | float | None = field(default=None)
    policy_property: str = field(default="release_policy", repr=False)

    symbol: ClassVar[str] = "D"

    def __post_init__(self) -> None:
        super().__post_init__()
        self.release_policy = as_policy(self.release_policy, 1, self.policy_property)

    def requested_release(self, current: float) -> float:
        return call_policy(self.release_policy, (current,), self.policy_property, self.name)

    def label(self) -> str:
        return f"{super().label()} [ release_policy={self.release_policy!r} ]"
