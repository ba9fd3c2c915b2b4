"""Numeric type registry and discrete/continuous domain classification."""

import math
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from unirange.core.int_width import int_limits


class NumericDomain(str, Enum):
    DISCRETE = "discrete"
    CONTINUOUS = "continuous"


class UnsupportedNumericTypeError(TypeError):
    """Raised when a bound type has no discrete or continuous sampler."""


@dataclass(frozen=True)
class NumericType:
    name: str
    domain: NumericDomain
    scalar: type
    bits: int | None
    signed: bool
    min_value: Any
    max_value: Any

    @property
    def dtype(self) -> np.dtype | None:
        if self.scalar in (int, float):
            return None
        return np.dtype(self.scalar)

    @property
    def is_discrete(self) -> bool:
        return self.domain is NumericDomain.DISCRETE

    def cast(self, value: Any) -> Any:
        if self.scalar is int:
            return int(value)
        if self.scalar is float:
            return float(value)
        return self.scalar(value)

    def next_toward(self, value: Any, target: Any) -> Any:
        """Adjacent representable value after `value` in the direction of
        `target`, computed in this type's own precision."""
        if self.is_discrete:
            raise UnsupportedNumericTypeError(
                f"next_toward is only defined for floating-point types, "
                f"got {self.name}"
            )
        if self.scalar is float:
            return math.nextafter(float(value), float(target))
        return np.nextafter(self.cast(value), self.cast(target))

    def to_builtin(self, value: Any) -> int | float:
        """Convert a value of this type to a JSON-serializable number."""
        if self.is_discrete:
            return int(value)
        return float(value)


PYTHON_INT = NumericType(
    name="int",
    domain=NumericDomain.DISCRETE,
    scalar=int,
    bits=None,
    signed=True,
    min_value=None,
    max_value=None,
)
PYTHON_FLOAT = NumericType(
    name="float",
    domain=NumericDomain.CONTINUOUS,
    scalar=float,
    bits=64,
    signed=True,
    min_value=-sys.float_info.max,
    max_value=sys.float_info.max,
)


def _numpy_numeric_type(name: str, scalar: type) -> NumericType:
    dt = np.dtype(scalar)
    bits = dt.itemsize * 8
    if dt.kind in "iu":
        signed = dt.kind == "i"
        lo, hi = int_limits(bits, signed=signed)
        return NumericType(
            name=name,
            domain=NumericDomain.DISCRETE,
            scalar=scalar,
            bits=bits,
            signed=signed,
            min_value=lo,
            max_value=hi,
        )
    info = np.finfo(dt)
    return NumericType(
        name=name,
        domain=NumericDomain.CONTINUOUS,
        scalar=scalar,
        bits=bits,
        signed=True,
        min_value=info.min,
        max_value=info.max,
    )


_NUMPY_SCALARS: tuple[tuple[str, type], ...] = (
    ("int8", np.int8),
    ("int16", np.int16),
    ("int32", np.int32),
    ("int64", np.int64),
    ("uint8", np.uint8),
    ("uint16", np.uint16),
    ("uint32", np.uint32),
    ("uint64", np.uint64),
    ("float16", np.float16),
    ("float32", np.float32),
    ("float64", np.float64),
    ("longdouble", np.longdouble),
)

_BY_NAME: dict[str, NumericType] = {
    PYTHON_INT.name: PYTHON_INT,
    PYTHON_FLOAT.name: PYTHON_FLOAT,
}
# Keyed by (kind, itemsize) so platform aliases such as longlong or intc
# resolve to the registered width.
_BY_LAYOUT: dict[tuple[str, int], NumericType] = {}
for _name, _scalar in _NUMPY_SCALARS:
    _numeric_type = _numpy_numeric_type(_name, _scalar)
    _BY_NAME[_name] = _numeric_type
    _layout = (np.dtype(_scalar).kind, np.dtype(_scalar).itemsize)
    _BY_LAYOUT.setdefault(_layout, _numeric_type)


def supported_numeric_types() -> tuple[NumericType, ...]:
    return tuple(_BY_NAME.values())


def _from_dtype(dt: np.dtype) -> NumericType:
    if dt.kind not in "iuf":
        raise UnsupportedNumericTypeError(
            f"unsupported numeric type: {dt.name}"
        )
    numeric_type = _BY_LAYOUT.get((dt.kind, dt.itemsize))
    if numeric_type is None:
        raise UnsupportedNumericTypeError(
            f"unsupported numeric type: {dt.name}"
        )
    return numeric_type


def _from_type(tp: type) -> NumericType:
    if issubclass(tp, (bool, np.bool_)):
        raise UnsupportedNumericTypeError(
            "bool is not a supported numeric type"
        )
    if issubclass(tp, np.generic):
        return _from_dtype(np.dtype(tp))
    if issubclass(tp, int):
        return PYTHON_INT
    if issubclass(tp, float):
        return PYTHON_FLOAT
    raise UnsupportedNumericTypeError(
        f"unsupported numeric type: {tp.__name__}"
    )


def numeric_type_for(obj: Any) -> NumericType:
    """Resolve a type name, numpy dtype, scalar type or value to its
    registered NumericType.

    Raises UnsupportedNumericTypeError for anything outside the registry,
    including bool.
    """
    if isinstance(obj, NumericType):
        return obj
    if isinstance(obj, str):
        if obj in _BY_NAME:
            return _BY_NAME[obj]
        try:
            dt = np.dtype(obj)
        except TypeError as err:
            raise UnsupportedNumericTypeError(
                f"unknown numeric type name: {obj!r}"
            ) from err
        return _from_dtype(dt)
    if isinstance(obj, np.dtype):
        return _from_dtype(obj)
    if isinstance(obj, type):
        return _from_type(obj)
    return _from_type(type(obj))


def classify_domain(obj: Any) -> NumericDomain:
    return numeric_type_for(obj).domain


def _numeric_type_of_value(value: Any) -> NumericType:
    # Names, dtypes and classes are accepted only through dtype=.
    return _from_type(type(value))


def _contains(wide: NumericType, narrow: NumericType) -> bool:
    if wide.domain is not narrow.domain:
        return False
    if wide.is_discrete:
        return (
            wide.min_value <= narrow.min_value
            and narrow.max_value <= wide.max_value
        )
    return wide.bits >= narrow.bits


def resolve_numeric_type(
    a: Any, b: Any, dtype: Any | None = None
) -> NumericType:
    """Pick the numeric type the bounds (a, b) are sampled in.

    An explicit dtype wins. Otherwise both bounds must share a type, or one
    must widen losslessly into the other. A Python scalar paired with a
    numpy scalar takes the numpy type, except that a Python float promotes
    a numpy integer to float64.
    """
    if dtype is not None:
        return numeric_type_for(dtype)

    lhs = _numeric_type_of_value(a)
    rhs = _numeric_type_of_value(b)
    if lhs == rhs:
        return lhs

    lhs_python = lhs.dtype is None
    rhs_python = rhs.dtype is None
    if lhs_python and rhs_python:
        return PYTHON_FLOAT
    if lhs_python or rhs_python:
        python_side, numpy_side = (lhs, rhs) if lhs_python else (rhs, lhs)
        if python_side.is_discrete or not numpy_side.is_discrete:
            return numpy_side
        return _BY_NAME["float64"]

    if _contains(lhs, rhs):
        return lhs
    if _contains(rhs, lhs):
        return rhs
    raise UnsupportedNumericTypeError(
        f"bounds have incompatible types {lhs.name} and {rhs.name}; "
        "pass dtype= to choose one"
    )
