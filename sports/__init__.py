from sports.badminton import calculate_badminton_metrics
from sports.base import MetricCalculationInput, MetricResult
from sports.basketball import calculate_basketball_metrics
from sports.volleyball import calculate_volleyball_metrics

__all__ = [
    "MetricCalculationInput",
    "MetricResult",
    "calculate_basketball_metrics",
    "calculate_volleyball_metrics",
    "calculate_badminton_metrics",
]
