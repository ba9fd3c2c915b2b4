import json
import logging
import math
import random
from collections.abc import Iterator
from pathlib import Path
from typing import Annotated, Any, TextIO

import srsly
import typer
from pydantic import ValidationError

from unirange.core.numeric_types import (
    NumericType,
    UnsupportedNumericTypeError,
    numeric_type_for,
    supported_numeric_types,
)
from unirange.core.trace import ConstructionTrace, TraceStep
from unirange.uniform.models import IntervalTag, UniformSpec
from unirange.uniform.wrapper import UniformDistributionWrapper

app = typer.Typer(
    help="Normalize interval bounds and sample uniformly within them."
)


class _SpecRowError(Exception):
    def __init__(self, *, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(reason)


def _dumps(row: dict[str, Any]) -> str:
    # sort_keys routes through the builtin json encoder, which writes floats
    # with full round-trip precision.
    return srsly.json_dumps(row, sort_keys=True)


def _parse_tag(value: str) -> IntervalTag:
    try:
        return IntervalTag.parse(value)
    except ValueError as err:
        raise typer.BadParameter(str(err)) from err


def _parse_numeric_type(value: str) -> NumericType:
    try:
        return numeric_type_for(value)
    except UnsupportedNumericTypeError as err:
        raise typer.BadParameter(str(err)) from err


def _parse_bounds(value: str, numeric_type: NumericType) -> tuple[Any, Any]:
    """Parse 'lo,hi' for a numeric type. Raises typer.BadParameter on invalid
    input."""
    parts = value.split(",")
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise typer.BadParameter(
            f"Invalid range '{value}': expected 'LO,HI' (e.g., '0,10')"
        )
    lo_s, hi_s = parts[0].strip(), parts[1].strip()

    def _parse_bound(raw: str) -> int | float:
        if numeric_type.is_discrete:
            # No float round-trip, so 64-bit bounds keep full precision.
            try:
                return int(raw)
            except ValueError as err:
                raise typer.BadParameter(
                    f"Invalid range '{value}': {numeric_type.name} bounds "
                    "must be integers"
                ) from err
        try:
            parsed = float(raw)
        except ValueError as err:
            raise typer.BadParameter(
                f"Invalid range '{value}': expected 'LO,HI' (e.g., '0,10')"
            ) from err
        if not math.isfinite(parsed):
            raise typer.BadParameter(
                f"Invalid range '{value}': bounds must be finite numbers "
                "(no nan/inf/-inf)"
            )
        return parsed

    lo = _parse_bound(lo_s)
    hi = _parse_bound(hi_s)
    if lo > hi:
        raise typer.BadParameter(
            f"Invalid range '{value}': low must be <= high"
        )
    return lo, hi


def _build_spec(tag: str, dtype: str, value_range: str) -> UniformSpec:
    interval_tag = _parse_tag(tag)
    numeric_type = _parse_numeric_type(dtype)
    lo, hi = _parse_bounds(value_range, numeric_type)
    try:
        return UniformSpec(
            tag=interval_tag, dtype=numeric_type.name, low=lo, high=hi
        )
    except ValidationError as err:
        message = err.errors(include_url=False)[0]["msg"]
        raise typer.BadParameter(message) from err


def _bounds_row(
    spec: UniformSpec, trace: list[TraceStep] | None = None
) -> dict[str, Any]:
    wrapper = UniformDistributionWrapper.from_spec(spec, trace=trace)
    numeric_type = wrapper.numeric_type
    return {
        "tag": spec.tag.value,
        "dtype": numeric_type.name,
        "domain": numeric_type.domain.value,
        "lower": numeric_type.to_builtin(wrapper.lower),
        "upper": numeric_type.to_builtin(wrapper.upper),
    }


def _iter_validated_specs(input_file: Path) -> Iterator[UniformSpec]:
    with input_file.open("r", encoding="utf-8") as input_handle:
        for line_number, line in enumerate(input_handle, start=1):
            stripped = line.strip()
            if not stripped:
                continue
            try:
                raw = json.loads(stripped)
            except json.JSONDecodeError as err:
                raise _SpecRowError(
                    line_number=line_number,
                    reason=f"malformed JSON ({err.msg})",
                ) from err
            try:
                spec = UniformSpec.model_validate(raw)
            except ValidationError as err:
                first_error = err.errors(include_url=False)[0]
                loc = ".".join(str(item) for item in first_error["loc"])
                message = first_error["msg"]
                raise _SpecRowError(
                    line_number=line_number,
                    reason=f"invalid spec row at '{loc}': {message}",
                ) from err
            if spec.low > spec.high:
                raise _SpecRowError(
                    line_number=line_number,
                    reason="low must be <= high",
                )
            yield spec


def _render_spec_row_error(input_file: Path, error: _SpecRowError) -> str:
    return (
        f"Error: invalid JSONL row in {input_file} at line "
        f"{error.line_number}: {error.reason}"
    )


def _write_row(handle: TextIO, row: dict[str, Any]) -> None:
    handle.write(_dumps(row))
    handle.write("\n")


TagOption = Annotated[
    str,
    typer.Option(
        "--tag",
        "-t",
        help=(
            "closed_closed, closed_open, open_closed, open_open "
            "(or [], [), (], ())"
        ),
    ),
]
DtypeOption = Annotated[
    str,
    typer.Option(
        "--dtype", "-d", help="Numeric type name (see `unirange types`)"
    ),
]
RangeOption = Annotated[
    str, typer.Option("--range", "-r", help="Interval bounds (lo,hi)")
]


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@app.command()
def bounds(
    value_range: RangeOption,
    tag: TagOption = IntervalTag.CLOSED_CLOSED.value,
    dtype: DtypeOption = "int",
    show_trace: Annotated[
        bool, typer.Option("--trace", help="Include construction trace")
    ] = False,
) -> None:
    """Print the closed bounds equivalent to the requested interval."""
    spec = _build_spec(tag, dtype, value_range)
    steps: list[TraceStep] = []
    row = _bounds_row(spec, trace=steps)
    if show_trace:
        trace = ConstructionTrace(tag=spec.tag.value, steps=steps)
        row["trace"] = trace.model_dump()["steps"]
    typer.echo(_dumps(row))


@app.command()
def sample(
    value_range: RangeOption,
    tag: TagOption = IntervalTag.CLOSED_CLOSED.value,
    dtype: DtypeOption = "int",
    count: Annotated[
        int, typer.Option("--count", "-n", help="Number of draws")
    ] = 1,
    seed: Annotated[
        int | None, typer.Option("--seed", "-s", help="Random seed")
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output", "-o", help="Output JSONL file (default stdout)"
        ),
    ] = None,
) -> None:
    """Draw values uniformly from the requested interval as JSONL."""
    if count < 0:
        typer.echo("Error: --count must be >= 0", err=True)
        raise typer.Exit(1)

    spec = _build_spec(tag, dtype, value_range)
    wrapper = UniformDistributionWrapper.from_spec(spec)
    numeric_type = wrapper.numeric_type
    rng = random.Random(seed)

    try:
        rows = [
            {"value": numeric_type.to_builtin(wrapper(rng))}
            for _ in range(count)
        ]
    except ValueError as err:
        typer.echo(f"Error: {err}", err=True)
        raise typer.Exit(1) from err

    if output is None:
        for row in rows:
            typer.echo(_dumps(row))
        return

    try:
        with output.open("w", encoding="utf-8") as output_handle:
            for row in rows:
                _write_row(output_handle, row)
    except OSError as err:
        typer.echo(f"Error: cannot write output file: {err}", err=True)
        raise typer.Exit(1) from err
    typer.echo(f"Sampled {count} values to {output}")


@app.command()
def normalize(
    input_file: Annotated[
        Path, typer.Argument(help="Input JSONL file of interval specs")
    ],
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Output JSONL file")
    ],
) -> None:
    """Normalize every interval spec in a JSONL file to closed bounds."""
    try:
        rows = [
            _bounds_row(spec) for spec in _iter_validated_specs(input_file)
        ]
    except _SpecRowError as err:
        typer.echo(_render_spec_row_error(input_file, err), err=True)
        raise typer.Exit(1) from err
    except OSError as err:
        typer.echo(f"Error: cannot read input file: {err}", err=True)
        raise typer.Exit(1) from err

    try:
        with output.open("w", encoding="utf-8") as output_handle:
            for row in rows:
                _write_row(output_handle, row)
    except OSError as err:
        typer.echo(f"Error: cannot write output file: {err}", err=True)
        raise typer.Exit(1) from err
    typer.echo(f"Normalized {len(rows)} intervals to {output}")


@app.command()
def types() -> None:
    """List supported numeric types and their domains."""
    for numeric_type in supported_numeric_types():
        typer.echo(f"{numeric_type.name}\t{numeric_type.domain.value}")


if __name__ == "__main__":
    app()
