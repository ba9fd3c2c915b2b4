from typing import Any

from pydantic import BaseModel, Field


class TraceStep(BaseModel):
    """Single step in a construction trace."""

    step: str = Field(description="Step identifier, e.g., 'lower_bound'")
    choice: str = Field(description="Human-readable description of the step")
    value: Any = Field(description="The computed value (serializable)")


class ConstructionTrace(BaseModel):
    """Complete trace of one wrapper construction."""

    tag: str = Field(description="Interval tag (closed_open, open_open, ...)")
    steps: list[TraceStep] = Field(
        default_factory=list, description="Ordered list of steps"
    )


def trace_step(
    trace: list[TraceStep] | None, step: str, choice: str, value: Any
) -> None:
    if trace is not None:
        trace.append(TraceStep(step=step, choice=choice, value=value))
