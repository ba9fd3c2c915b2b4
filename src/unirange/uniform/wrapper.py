import logging
import random
from typing import Any

from unirange.core.numeric_types import NumericType, resolve_numeric_type
from unirange.core.trace import TraceStep, trace_step
from unirange.uniform.bounds import transform_bounds
from unirange.uniform.distributions import (
    ClosedIntervalDistribution,
    select_distribution,
)
from unirange.uniform.models import IntervalTag, UniformSpec

logger = logging.getLogger(__name__)


class UniformDistributionWrapper:
    """Uniform distribution over (a, b) under an interval tag.

    The requested interval is normalized to closed bounds once, at
    construction, and the sampler for the bounds' domain is built over them.
    Drawing delegates to that sampler.

    Preconditions (unchecked): a <= b, and the tag's interval over (a, b) is
    non-empty. Unsupported bound types raise UnsupportedNumericTypeError
    before any arithmetic.
    """

    def __init__(
        self,
        tag: IntervalTag | str,
        a: Any,
        b: Any,
        *,
        dtype: Any | None = None,
        trace: list[TraceStep] | None = None,
    ) -> None:
        self._tag = IntervalTag.parse(tag)
        numeric_type = resolve_numeric_type(a, b, dtype)
        trace_step(
            trace,
            "numeric_type",
            f"{numeric_type.name} ({numeric_type.domain.value})",
            numeric_type.name,
        )

        bounds = transform_bounds(self._tag, a, b, numeric_type)
        trace_step(
            trace,
            "lower_bound",
            "open lower bound stepped"
            if self._tag.lower_open
            else "closed lower bound kept",
            numeric_type.to_builtin(bounds.lower),
        )
        trace_step(
            trace,
            "upper_bound",
            "open upper bound stepped"
            if self._tag.upper_open and numeric_type.is_discrete
            else "upper bound kept",
            numeric_type.to_builtin(bounds.upper),
        )

        distribution_cls = select_distribution(numeric_type)
        self._distribution: ClosedIntervalDistribution = distribution_cls(
            bounds.lower, bounds.upper, numeric_type
        )
        logger.debug(
            "Normalized %s%r, %r%s as %s to [%r, %r] using %s",
            self._tag.notation[0],
            a,
            b,
            self._tag.notation[1],
            numeric_type.name,
            bounds.lower,
            bounds.upper,
            distribution_cls.__name__,
        )

    @classmethod
    def from_spec(
        cls, spec: UniformSpec, trace: list[TraceStep] | None = None
    ) -> "UniformDistributionWrapper":
        return cls(
            spec.tag, spec.low, spec.high, dtype=spec.dtype, trace=trace
        )

    @property
    def tag(self) -> IntervalTag:
        return self._tag

    @property
    def numeric_type(self) -> NumericType:
        return self._distribution.numeric_type

    @property
    def distribution(self) -> ClosedIntervalDistribution:
        return self._distribution

    @property
    def lower(self) -> Any:
        return self._distribution.min

    @property
    def upper(self) -> Any:
        return self._distribution.max

    def __call__(self, rng: random.Random | None = None) -> Any:
        if rng is None:
            rng = random.Random()
        return self._distribution(rng)

    def sample(self, rng: random.Random | None = None) -> Any:
        return self(rng)

    def __repr__(self) -> str:
        return (
            f"UniformDistributionWrapper({self._tag.value!r}, "
            f"lower={self.lower!r}, upper={self.upper!r}, "
            f"dtype={self.numeric_type.name!r})"
        )


def uniform(
    tag: IntervalTag | str,
    a: Any,
    b: Any,
    rng: random.Random | None = None,
    *,
    dtype: Any | None = None,
) -> Any:
    """Draw one value from (a, b) under `tag`."""
    return UniformDistributionWrapper(tag, a, b, dtype=dtype)(rng)
