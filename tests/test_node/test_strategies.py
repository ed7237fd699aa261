import pytest

from rivernet.node import (
    FixedRelease,
    FlowShape,
    ImmediateShape,
    ProportionalRelease,
    RecessionShape,
    ReleasePolicy,
    SpillAbove,
    UniformShape,
)


class TestImmediateShape:
    def test_everything_at_offset_zero(self):
        shape = ImmediateShape()
        assert shape(0, 3.0) == 1.0
        assert shape(1, 3.0) == 0.0

    def test_satisfies_protocol(self):
        assert isinstance(ImmediateShape(), FlowShape)


class TestUniformShape:
    def test_whole_days(self):
        shape = UniformShape()
        assert [shape(k, 4.0) for k in range(4)] == [0.25, 0.25, 0.25, 0.25]

    def test_fractional_last_day(self):
        shape = UniformShape()
        fractions = [shape(k, 2.5) for k in range(3)]
        assert fractions == pytest.approx([0.4, 0.4, 0.2])
        assert sum(fractions) == pytest.approx(1.0)

    def test_zero_duration_is_immediate(self):
        shape = UniformShape()
        assert shape(0, 0.0) == 1.0
        assert shape(1, 0.0) == 0.0


class TestRecessionShape:
    def test_normalised_over_span(self):
        shape = RecessionShape(ratio=0.5)
        fractions = [shape(k, 3.0) for k in range(3)]
        assert fractions == pytest.approx([4 / 7, 2 / 7, 1 / 7])

    def test_zero_beyond_span(self):
        assert RecessionShape(ratio=0.5)(3, 3.0) == 0.0

    def test_rejects_invalid_ratio(self):
        with pytest.raises(ValueError, match="ratio must be in"):
            RecessionShape(ratio=0.0)


class TestReleasePolicies:
    def test_fixed_release(self):
        policy = FixedRelease(rate=5.0)
        assert policy(12.0) == 5.0
        assert policy(3.0) == 3.0

    def test_fixed_release_rejects_negative_rate(self):
        with pytest.raises(ValueError, match="rate cannot be negative"):
            FixedRelease(rate=-1.0)

    def test_proportional_release(self):
        assert ProportionalRelease(fraction=0.25)(8.0) == 2.0

    def test_proportional_release_bounds(self):
        with pytest.raises(ValueError, match="fraction must be in"):
            ProportionalRelease(fraction=1.5)

    def test_spill_above(self):
        policy = SpillAbove(threshold=10.0)
        assert policy(15.0) == 5.0
        assert policy(4.0) == 0.0

    def test_satisfy_protocol(self):
        for policy in (FixedRelease(1.0), ProportionalRelease(), SpillAbove(0.0)):
            assert isinstance(policy, ReleasePolicy)

    def test_frozen(self):
        policy = FixedRelease(rate=1.0)
        with pytest.raises(AttributeError):
            policy.rate = 2.0
