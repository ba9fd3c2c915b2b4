import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator, model_validator

from unirange.core.numeric_types import (
    NumericType,
    UnsupportedNumericTypeError,
    numeric_type_for,
)


class IntervalTag(str, Enum):
    CLOSED_CLOSED = "closed_closed"
    CLOSED_OPEN = "closed_open"
    OPEN_CLOSED = "open_closed"
    OPEN_OPEN = "open_open"

    @property
    def lower_open(self) -> bool:
        return self in (IntervalTag.OPEN_CLOSED, IntervalTag.OPEN_OPEN)

    @property
    def upper_open(self) -> bool:
        return self in (IntervalTag.CLOSED_OPEN, IntervalTag.OPEN_OPEN)

    @property
    def notation(self) -> str:
        return _NOTATION_BY_TAG[self]

    @classmethod
    def parse(cls, value: "IntervalTag | str") -> "IntervalTag":
        """Accept a tag, its value ("open_closed") or interval brackets
        ("(]")."""
        if isinstance(value, IntervalTag):
            return value
        if not isinstance(value, str):
            raise ValueError(
                f"unknown interval tag {value!r}: expected a string or "
                "IntervalTag"
            )
        token = value.strip().lower().replace("-", "_")
        if token in _TAG_BY_NOTATION:
            return _TAG_BY_NOTATION[token]
        try:
            return cls(token)
        except ValueError as err:
            valid = ", ".join(tag.value for tag in cls)
            raise ValueError(
                f"unknown interval tag {value!r}: expected one of {valid} "
                "or one of [], [), (], ()"
            ) from err


_NOTATION_BY_TAG: dict[IntervalTag, str] = {
    IntervalTag.CLOSED_CLOSED: "[]",
    IntervalTag.CLOSED_OPEN: "[)",
    IntervalTag.OPEN_CLOSED: "(]",
    IntervalTag.OPEN_OPEN: "()",
}
_TAG_BY_NOTATION: dict[str, IntervalTag] = {
    notation: tag for tag, notation in _NOTATION_BY_TAG.items()
}


def _validate_no_bool_bounds(data: Any) -> None:
    if not isinstance(data, dict):
        return

    for field_name in ("low", "high"):
        if isinstance(data.get(field_name), bool):
            raise ValueError(f"{field_name}: bool is not allowed for bounds")


class UniformSpec(BaseModel):
    """Serializable description of one normalized uniform distribution.

    `low <= high` is a caller precondition and is not checked here.
    """

    tag: IntervalTag
    dtype: str = "int"
    low: int | float
    high: int | float

    @model_validator(mode="before")
    @classmethod
    def validate_input_bounds(cls, data: Any) -> Any:
        _validate_no_bool_bounds(data)
        return data

    @field_validator("tag", mode="before")
    @classmethod
    def parse_tag(cls, value: Any) -> Any:
        if isinstance(value, str):
            return IntervalTag.parse(value)
        return value

    @field_validator("dtype")
    @classmethod
    def validate_dtype(cls, value: str) -> str:
        try:
            return numeric_type_for(value).name
        except UnsupportedNumericTypeError as err:
            raise ValueError(str(err)) from err

    @model_validator(mode="after")
    def validate_bounds(self) -> "UniformSpec":
        numeric_type = self.numeric_type
        for name in ("low", "high"):
            value = getattr(self, name)
            if numeric_type.is_discrete:
                if not isinstance(value, int):
                    raise ValueError(
                        f"{name}: {numeric_type.name} bounds must be "
                        f"integers, got {value!r}"
                    )
                if numeric_type.bits is not None and not (
                    numeric_type.min_value <= value <= numeric_type.max_value
                ):
                    raise ValueError(
                        f"{name}: {value} is outside the {numeric_type.name} "
                        f"range [{numeric_type.min_value}, "
                        f"{numeric_type.max_value}]"
                    )
            elif isinstance(value, float) and not math.isfinite(value):
                raise ValueError(f"{name}: bounds must be finite numbers")
            elif abs(value) > float(numeric_type.max_value):
                raise ValueError(
                    f"{name}: {value} overflows {numeric_type.name}"
                )
        return self

    @property
    def numeric_type(self) -> NumericType:
        return numeric_type_for(self.dtype)
