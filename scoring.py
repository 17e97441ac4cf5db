"""Benchmark-driven 0-100 scoring.

Every sport and action routes through the same four primitives:
score_with_preference, adjust_weights_for_missing_metrics,
calculate_weighted_score and calculate_scoring_confidence. The per-action
numbers live in the benchmark tables.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from benchmark_registry import get_benchmarks
from benchmarks.base import MetricBenchmark, SportBenchmarks
from geometry import is_finite_number, round_half_up

logger = logging.getLogger(__name__)

# Benchmark tables are calibrated slightly conservatively; this lifts mid-range scores.
DEFAULT_GRADE_CURVE = 0.15

MetricsMap = Mapping[str, Optional[float]]


@dataclass
class MetricScoreResult:
    raw_value: Optional[float]
    normalized_score: Optional[float]
    included: bool
    exclude_reason: Optional[str] = None


@dataclass
class ScoringResult:
    overall_score: float = 0.0
    breakdown: Dict[str, float] = field(default_factory=dict)
    details: Dict[str, MetricScoreResult] = field(default_factory=dict)
    metrics_included: int = 0
    metrics_total: int = 0
    confidence: float = 0.0
    calculated_at: float = field(default_factory=time.time)


def is_present(value) -> bool:
    return is_finite_number(value)


def clamp_score(score: float) -> float:
    if not is_present(score):
        return 0.0
    return max(0.0, min(100.0, score))


def normalize_to_range(value: float, low: float, high: float) -> float:
    if not (is_present(value) and is_present(low) and is_present(high)):
        return 0.0
    if high <= low:
        return 100.0 if value >= low else 0.0
    return clamp_score((value - low) / (high - low) * 100.0)


def score_with_ideal_window(value: float, benchmark: MetricBenchmark) -> float:
    """Symmetric partial credit: 100 inside the ideal window, linear to 0 at the acceptable edges."""
    if not is_present(value):
        return 0.0
    if benchmark.ideal_min <= value <= benchmark.ideal_max:
        return 100.0
    if value < benchmark.ideal_min:
        if value < benchmark.acceptable_min:
            return 0.0
        span = benchmark.ideal_min - benchmark.acceptable_min
        return clamp_score((1 - (benchmark.ideal_min - value) / span) * 100.0)
    if value > benchmark.acceptable_max:
        return 0.0
    span = benchmark.acceptable_max - benchmark.ideal_max
    return clamp_score((1 - (value - benchmark.ideal_max) / span) * 100.0)


def score_with_preference(value: float, benchmark: MetricBenchmark) -> float:
    """Like score_with_ideal_window, but overshooting in the preferred direction costs at most 20 points."""
    if not is_present(value):
        return 0.0
    if benchmark.ideal_min <= value <= benchmark.ideal_max:
        return 100.0

    base = score_with_ideal_window(value, benchmark)
    if benchmark.preference == "higher":
        if benchmark.ideal_max < value <= benchmark.acceptable_max:
            ratio = (value - benchmark.ideal_max) / (benchmark.acceptable_max - benchmark.ideal_max)
            return clamp_score(100.0 - ratio * 20.0)
    elif benchmark.preference == "lower":
        if benchmark.acceptable_min <= value < benchmark.ideal_min:
            ratio = (benchmark.ideal_min - value) / (benchmark.ideal_min - benchmark.acceptable_min)
            return clamp_score(100.0 - ratio * 20.0)
    return base


def calculate_weighted_score(scores: Mapping[str, float], weights: Mapping[str, float]) -> float:
    total_weight = 0.0
    weighted_sum = 0.0
    for metric, value in scores.items():
        weight = weights.get(metric)
        if weight is not None and weight > 0 and is_present(value):
            weighted_sum += value * weight
            total_weight += weight
    if total_weight == 0:
        return 0.0
    return clamp_score(round_half_up(weighted_sum / total_weight))


def adjust_weights_for_missing_metrics(available: Iterable[str], weights: Mapping[str, float]) -> Dict[str, float]:
    """Renormalize the weights of available metrics so they sum to 1."""
    available = set(available)
    available_weight = sum(w for m, w in weights.items() if m in available)
    if available_weight == 0:
        return {}
    return {m: w / available_weight for m, w in weights.items() if m in available}


def calculate_scoring_confidence(included: int, total: int, min_required: int) -> float:
    if included < min_required or total == 0:
        return 0.0
    if total <= min_required:
        coverage = 1.0
    else:
        coverage = (included - min_required) / (total - min_required)
    return min(1.0, 0.5 + 0.5 * max(0.0, coverage))


def apply_grade_curve(score: float, curve_factor: float = 0.1) -> float:
    if not is_present(score) or curve_factor <= 0:
        return clamp_score(score)
    curved = math.pow(max(0.0, score) / 100.0, 1 - curve_factor) * 100.0
    return clamp_score(round_half_up(curved))


def empty_result() -> ScoringResult:
    return ScoringResult()


def score(metrics: MetricsMap, benchmarks: SportBenchmarks, grade_curve: float = DEFAULT_GRADE_CURVE) -> ScoringResult:
    started = time.perf_counter()
    details: Dict[str, MetricScoreResult] = {}
    breakdown: Dict[str, float] = {}

    for key, benchmark in benchmarks.metrics.items():
        raw = metrics.get(key)
        if not is_present(raw):
            details[key] = MetricScoreResult(None, None, False, "Metric not available or invalid")
            continue
        normalized = score_with_preference(raw, benchmark)
        if not is_present(normalized):
            details[key] = MetricScoreResult(raw, None, False, "Score calculation resulted in invalid value")
            continue
        details[key] = MetricScoreResult(raw, normalized, True)
        breakdown[key] = round_half_up(normalized)

    included = len(breakdown)
    total = len(benchmarks.metrics)
    if included < benchmarks.min_required_metrics:
        logger.warning("Insufficient metrics: %d/%d required", included, benchmarks.min_required_metrics)
        return ScoringResult(0.0, breakdown, details, included, total, 0.0)

    weights = adjust_weights_for_missing_metrics(breakdown, benchmarks.weights)
    overall = calculate_weighted_score(breakdown, weights)
    confidence = calculate_scoring_confidence(included, total, benchmarks.min_required_metrics)
    curved = clamp_score(apply_grade_curve(overall, grade_curve))

    logger.debug(
        "Scored %d/%d metrics in %.2fms: raw %.0f, curved %.0f, confidence %.2f",
        included,
        total,
        (time.perf_counter() - started) * 1000.0,
        overall,
        curved,
        confidence,
    )
    return ScoringResult(curved, breakdown, details, included, total, confidence)


def calculate_score(sport: str, action: str, metrics: MetricsMap) -> ScoringResult:
    benchmarks = get_benchmarks(sport, action)
    if benchmarks is None:
        logger.error("Unsupported action: %s/%s", sport, action)
        return empty_result()
    return score(metrics, benchmarks)


def calculate_score_quick(sport: str, action: str, metrics: MetricsMap) -> float:
    return calculate_score(sport, action, metrics).overall_score


_LETTER_GRADES = [
    (97, "A+"), (93, "A"), (90, "A-"),
    (87, "B+"), (83, "B"), (80, "B-"),
    (77, "C+"), (73, "C"), (70, "C-"),
    (67, "D+"), (63, "D"), (60, "D-"),
]

_PERFORMANCE_LEVELS = [
    (90, "Excellent"),
    (80, "Good"),
    (70, "Average"),
    (60, "Below Average"),
    (50, "Needs Improvement"),
]


def get_letter_grade(value: float) -> str:
    for threshold, grade in _LETTER_GRADES:
        if value >= threshold:
            return grade
    return "F"


def get_performance_level(value: float) -> str:
    for threshold, level in _PERFORMANCE_LEVELS:
        if value >= threshold:
            return level
    return "Developing"


def get_weakest_metrics(breakdown: Mapping[str, float], count: int = 3) -> List[str]:
    return [key for key, _ in sorted(breakdown.items(), key=lambda kv: kv[1])][:count]


def get_strongest_metrics(breakdown: Mapping[str, float], count: int = 3) -> List[str]:
    return [key for key, _ in sorted(breakdown.items(), key=lambda kv: kv[1], reverse=True)][:count]
