"""Closed-interval uniform samplers driven by a caller-supplied rng."""

import random
from typing import Any

import numpy as np

from unirange.core.numeric_types import (
    NumericDomain,
    NumericType,
    UnsupportedNumericTypeError,
    resolve_numeric_type,
)


class _ClosedIntervalDistribution:
    domain: NumericDomain

    def __init__(
        self, lo: Any, hi: Any, numeric_type: NumericType | None = None
    ) -> None:
        if numeric_type is None:
            numeric_type = resolve_numeric_type(lo, hi)
        if numeric_type.domain is not self.domain:
            raise UnsupportedNumericTypeError(
                f"{type(self).__name__} requires a {self.domain.value} type, "
                f"got {numeric_type.name}"
            )
        self._numeric_type = numeric_type
        self._lo = numeric_type.cast(lo)
        self._hi = numeric_type.cast(hi)

    @property
    def numeric_type(self) -> NumericType:
        return self._numeric_type

    @property
    def min(self) -> Any:
        return self._lo

    @property
    def max(self) -> Any:
        return self._hi

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            self._numeric_type == other._numeric_type
            and self._lo == other._lo
            and self._hi == other._hi
        )

    def __hash__(self) -> int:
        return hash((type(self), self._numeric_type.name, self._lo, self._hi))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._lo!r}, {self._hi!r}, "
            f"dtype={self._numeric_type.name!r})"
        )


class UniformIntDistribution(_ClosedIntervalDistribution):
    """Uniform integer in [lo, hi] inclusive."""

    domain = NumericDomain.DISCRETE

    def __call__(self, rng: random.Random) -> Any:
        # randint raises ValueError for lo > hi.
        value = rng.randint(int(self._lo), int(self._hi))
        return self._numeric_type.cast(value)


class UniformRealDistribution(_ClosedIntervalDistribution):
    """Uniform real in [lo, hi] inclusive.

    Draws interpolate with `u = rng.random()`, which has 2**-53 granularity,
    so not every representable value in [lo, hi] is reachable. Values
    strictly between lo and lo + (hi - lo) * 2**-53 are never drawn, and lo
    itself is returned only when u == 0.
    """

    domain = NumericDomain.CONTINUOUS

    def __call__(self, rng: random.Random) -> Any:
        if self._lo == self._hi:
            return self._lo
        u = rng.random()
        if self._numeric_type.scalar is np.longdouble:
            u = np.longdouble(u)
            lo, hi = self._lo, self._hi
        else:
            lo, hi = float(self._lo), float(self._hi)
        # Weighted form stays finite for lo=-max, hi=max where hi - lo
        # would overflow.
        value = self._numeric_type.cast((1 - u) * lo + u * hi)
        return min(max(value, self._lo), self._hi)


ClosedIntervalDistribution = UniformIntDistribution | UniformRealDistribution

_DISTRIBUTIONS: dict[NumericDomain, type[_ClosedIntervalDistribution]] = {
    NumericDomain.DISCRETE: UniformIntDistribution,
    NumericDomain.CONTINUOUS: UniformRealDistribution,
}


def select_distribution(
    numeric_type: NumericType,
) -> type[_ClosedIntervalDistribution]:
    """Return the closed-interval sampler class for a numeric type."""
    return _DISTRIBUTIONS[numeric_type.domain]
