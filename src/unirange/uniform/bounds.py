"""Closed-bound transformation rules for the four interval conventions.

Conceptually, for a tag T and bounds (a, b):

    T over (a, b) == [uniform_lower_bound(T, a, b),
                      uniform_upper_bound(T, a, b)]

Discrete types step to the adjacent integer. Continuous types step the lower
bound to the adjacent representable value toward b, and always keep b as an
inclusive upper bound.
"""

from collections.abc import Callable
from typing import Any, NamedTuple

from unirange.core.int_width import step_down, step_up
from unirange.core.numeric_types import (
    NumericDomain,
    NumericType,
    resolve_numeric_type,
)
from unirange.uniform.models import IntervalTag

BoundRule = Callable[[Any, Any, NumericType], Any]


class ClosedBounds(NamedTuple):
    lower: Any
    upper: Any


def _keep_lower(a: Any, b: Any, numeric_type: NumericType) -> Any:
    return numeric_type.cast(a)


def _keep_upper(a: Any, b: Any, numeric_type: NumericType) -> Any:
    return numeric_type.cast(b)


def _next_int_above(a: Any, b: Any, numeric_type: NumericType) -> Any:
    stepped = step_up(int(a), numeric_type.bits, signed=numeric_type.signed)
    return numeric_type.cast(stepped)


def _next_int_below(a: Any, b: Any, numeric_type: NumericType) -> Any:
    stepped = step_down(int(b), numeric_type.bits, signed=numeric_type.signed)
    return numeric_type.cast(stepped)


def _next_real_toward_b(a: Any, b: Any, numeric_type: NumericType) -> Any:
    return numeric_type.next_toward(a, b)


_D = NumericDomain.DISCRETE
_C = NumericDomain.CONTINUOUS

_LOWER_RULES: dict[tuple[NumericDomain, IntervalTag], BoundRule] = {
    (_D, IntervalTag.CLOSED_CLOSED): _keep_lower,
    (_D, IntervalTag.CLOSED_OPEN): _keep_lower,
    (_D, IntervalTag.OPEN_CLOSED): _next_int_above,
    (_D, IntervalTag.OPEN_OPEN): _next_int_above,
    (_C, IntervalTag.CLOSED_CLOSED): _keep_lower,
    (_C, IntervalTag.CLOSED_OPEN): _keep_lower,
    (_C, IntervalTag.OPEN_CLOSED): _next_real_toward_b,
    (_C, IntervalTag.OPEN_OPEN): _next_real_toward_b,
}

# Continuous upper bounds stay b for every tag, open or closed.
_UPPER_RULES: dict[tuple[NumericDomain, IntervalTag], BoundRule] = {
    (_D, IntervalTag.CLOSED_CLOSED): _keep_upper,
    (_D, IntervalTag.CLOSED_OPEN): _next_int_below,
    (_D, IntervalTag.OPEN_CLOSED): _keep_upper,
    (_D, IntervalTag.OPEN_OPEN): _next_int_below,
    (_C, IntervalTag.CLOSED_CLOSED): _keep_upper,
    (_C, IntervalTag.CLOSED_OPEN): _keep_upper,
    (_C, IntervalTag.OPEN_CLOSED): _keep_upper,
    (_C, IntervalTag.OPEN_OPEN): _keep_upper,
}


def uniform_lower_bound(
    tag: IntervalTag | str,
    a: Any,
    b: Any,
    numeric_type: NumericType | None = None,
) -> Any:
    tag = IntervalTag.parse(tag)
    if numeric_type is None:
        numeric_type = resolve_numeric_type(a, b)
    return _LOWER_RULES[(numeric_type.domain, tag)](a, b, numeric_type)


def uniform_upper_bound(
    tag: IntervalTag | str,
    a: Any,
    b: Any,
    numeric_type: NumericType | None = None,
) -> Any:
    tag = IntervalTag.parse(tag)
    if numeric_type is None:
        numeric_type = resolve_numeric_type(a, b)
    return _UPPER_RULES[(numeric_type.domain, tag)](a, b, numeric_type)


def transform_bounds(
    tag: IntervalTag | str,
    a: Any,
    b: Any,
    numeric_type: NumericType | None = None,
) -> ClosedBounds:
    """Return the closed bounds equivalent to `tag` over (a, b).

    Neither `a <= b` nor non-emptiness of the result is checked. Discrete
    steps that leave the type's range wrap around instead of raising.
    """
    tag = IntervalTag.parse(tag)
    if numeric_type is None:
        numeric_type = resolve_numeric_type(a, b)
    return ClosedBounds(
        lower=uniform_lower_bound(tag, a, b, numeric_type),
        upper=uniform_upper_bound(tag, a, b, numeric_type),
    )
