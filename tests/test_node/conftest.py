import pytest


class SpyFlowShape:
    """Immediate pass-through that records every call."""

    def __init__(self):
        self.calls: list[tuple[float, float]] = []

    def __call__(self, offset: float, duration: float) -> float:
        self.calls.append((offset, duration))
        return 1.0 if offset == 0 else 0.0


class FakeReleasePolicy:
    def __init__(self, result: object = 0.0):
        self._result = result

    def __call__(self, current: float) -> object:
        return self._result


@pytest.fixture
def spy_flow_shape() -> SpyFlowShape:
    return SpyFlowShape()
