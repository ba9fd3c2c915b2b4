"""uniform family: uniform sampling over open and closed intervals."""

from unirange.uniform.bounds import (
    ClosedBounds,
    transform_bounds,
    uniform_lower_bound,
    uniform_upper_bound,
)
from unirange.uniform.distributions import (
    UniformIntDistribution,
    UniformRealDistribution,
    select_distribution,
)
from unirange.uniform.models import IntervalTag, UniformSpec
from unirange.uniform.wrapper import UniformDistributionWrapper, uniform

__all__ = [
    "ClosedBounds",
    "IntervalTag",
    "UniformDistributionWrapper",
    "UniformIntDistribution",
    "UniformRealDistribution",
    "UniformSpec",
    "select_distribution",
    "transform_bounds",
    "uniform",
    "uniform_lower_bound",
    "uniform_upper_bound",
]
