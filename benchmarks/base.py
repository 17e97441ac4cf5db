from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

PREFERENCES = ("higher", "lower", "center")


@dataclass(frozen=True)
class MetricBenchmark:
    ideal_min: float
    ideal_max: float
    acceptable_min: float
    acceptable_max: float
    # "higher", "lower" or "center"
    preference: str = "center"

    def __post_init__(self):
        if not self.acceptable_min <= self.ideal_min <= self.ideal_max <= self.acceptable_max:
            raise ValueError(
                "Benchmark ranges out of order: acceptable %s..%s must contain ideal %s..%s"
                % (self.acceptable_min, self.acceptable_max, self.ideal_min, self.ideal_max)
            )
        if self.preference not in PREFERENCES:
            raise ValueError("Unknown benchmark preference: %r" % (self.preference,))


@dataclass(frozen=True)
class SportBenchmarks:
    """Per-action benchmark table. Metric and weight maps are read-only views."""

    metrics: Mapping[str, MetricBenchmark]
    # Weights need not sum to 1; scoring renormalizes them.
    weights: Mapping[str, float] = field(default_factory=dict)
    min_required_metrics: int = 1

    def __post_init__(self):
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))
