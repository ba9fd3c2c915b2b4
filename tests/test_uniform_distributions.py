import math
import random
import sys

import numpy as np
import pytest

from unirange.core.numeric_types import (
    UnsupportedNumericTypeError,
    numeric_type_for,
    supported_numeric_types,
)
from unirange.uniform.distributions import (
    UniformIntDistribution,
    UniformRealDistribution,
    select_distribution,
)


class TestUniformIntDistribution:
    def test_draws_cover_closed_range(self, rng: random.Random) -> None:
        distribution = UniformIntDistribution(0, 3)
        seen = {distribution(rng) for _ in range(400)}
        assert seen == {0, 1, 2, 3}

    def test_single_value_range(self, rng: random.Random) -> None:
        distribution = UniformIntDistribution(7, 7)
        assert {distribution(rng) for _ in range(20)} == {7}

    def test_preserves_numpy_type(self, rng: random.Random) -> None:
        distribution = UniformIntDistribution(np.int8(-5), np.int8(5))
        for _ in range(50):
            value = distribution(rng)
            assert type(value) is np.int8
            assert -5 <= value <= 5

    def test_full_uint64_range(self, rng: random.Random) -> None:
        distribution = UniformIntDistribution(
            np.uint64(0), np.uint64((1 << 64) - 1)
        )
        for _ in range(50):
            value = distribution(rng)
            assert type(value) is np.uint64
            assert 0 <= int(value) <= (1 << 64) - 1

    def test_inverted_range_surfaces_delegate_error(
        self, rng: random.Random
    ) -> None:
        distribution = UniformIntDistribution(4, 3)
        assert distribution.min == 4
        assert distribution.max == 3
        with pytest.raises(ValueError):
            distribution(rng)

    def test_rejects_continuous_type(self) -> None:
        with pytest.raises(UnsupportedNumericTypeError, match="discrete"):
            UniformIntDistribution(0.0, 1.0)

    def test_equality_and_repr(self) -> None:
        int8 = numeric_type_for("int8")
        assert UniformIntDistribution(1, 2, int8) == UniformIntDistribution(
            np.int8(1), np.int8(2)
        )
        assert UniformIntDistribution(1, 2) != UniformIntDistribution(1, 3)
        assert repr(UniformIntDistribution(1, 2)) == (
            "UniformIntDistribution(1, 2, dtype='int')"
        )


class TestUniformRealDistribution:
    def test_draws_within_closed_range(self, rng: random.Random) -> None:
        distribution = UniformRealDistribution(-2.5, 4.0)
        values = [distribution(rng) for _ in range(500)]
        assert all(-2.5 <= value <= 4.0 for value in values)
        assert all(type(value) is float for value in values)

    def test_degenerate_range_returns_bound(
        self, rng: random.Random
    ) -> None:
        distribution = UniformRealDistribution(1.5, 1.5)
        assert distribution(rng) == 1.5

    def test_full_finite_range_stays_finite(
        self, rng: random.Random
    ) -> None:
        lowest, highest = -sys.float_info.max, sys.float_info.max
        distribution = UniformRealDistribution(lowest, highest)
        for _ in range(200):
            value = distribution(rng)
            assert lowest <= value <= highest

    @pytest.mark.parametrize("name", ["float16", "float32", "longdouble"])
    def test_preserves_numpy_type(self, name: str, rng: random.Random) -> None:
        numeric_type = numeric_type_for(name)
        lo, hi = numeric_type.cast(0.0), numeric_type.cast(1.0)
        distribution = UniformRealDistribution(lo, hi)
        for _ in range(200):
            value = distribution(rng)
            assert type(value) is numeric_type.scalar
            assert lo <= value <= hi

    @pytest.mark.parametrize("name", ["float16", "float32"])
    def test_narrow_float_extremes_stay_in_range(
        self, name: str, rng: random.Random
    ) -> None:
        numeric_type = numeric_type_for(name)
        lo = numeric_type.cast(numeric_type.min_value)
        hi = numeric_type.cast(numeric_type.max_value)
        distribution = UniformRealDistribution(lo, hi)
        for _ in range(200):
            value = distribution(rng)
            assert np.isfinite(value)
            assert lo <= value <= hi

    def test_rejects_discrete_type(self) -> None:
        with pytest.raises(UnsupportedNumericTypeError, match="continuous"):
            UniformRealDistribution(0, 1)

    def test_zero_draw_returns_lower_bound(self) -> None:
        class _FixedRandom(random.Random):
            def random(self) -> float:
                return 0.0

        distribution = UniformRealDistribution(
            math.nextafter(0.0, 1.0), 1.0
        )
        assert distribution(_FixedRandom()) == 5e-324

    def test_smallest_nonzero_draw_skips_values_near_lower_bound(
        self,
    ) -> None:
        class _FixedRandom(random.Random):
            def random(self) -> float:
                return 2.0**-53

        distribution = UniformRealDistribution(0.0, 1.0)
        assert distribution(_FixedRandom()) == 2.0**-53

    def test_same_seed_same_draws(self) -> None:
        distribution = UniformRealDistribution(0.0, 10.0)
        first = [distribution(random.Random(3)) for _ in range(3)]
        second = [distribution(random.Random(3)) for _ in range(3)]
        assert first == second


@pytest.mark.parametrize(
    "numeric_type",
    supported_numeric_types(),
    ids=lambda numeric_type: numeric_type.name,
)
def test_select_distribution_routes_every_supported_type(
    numeric_type, rng: random.Random
) -> None:
    distribution_cls = select_distribution(numeric_type)
    if numeric_type.is_discrete:
        assert distribution_cls is UniformIntDistribution
    else:
        assert distribution_cls is UniformRealDistribution

    lo, hi = numeric_type.cast(0), numeric_type.cast(10)
    distribution = distribution_cls(lo, hi, numeric_type)
    value = distribution(rng)
    assert type(value) is numeric_type.scalar
    assert lo <= value <= hi
