from types import MappingProxyType
from typing import Mapping, Optional

from benchmarks.base import MetricBenchmark, SportBenchmarks

RELEASE_ANGLE = MetricBenchmark(42, 67, 0, 90, "higher")
ELBOW_ANGLE = MetricBenchmark(152, 174, 115, 180, "higher")
KNEE_ANGLE = MetricBenchmark(162, 180, 125, 180, "higher")
JUMP_HEIGHT = MetricBenchmark(0.05, 0.18, 0.005, 0.35, "higher")
STABILITY_INDEX = MetricBenchmark(72, 100, 38, 100, "higher")
FOLLOW_THROUGH = MetricBenchmark(65, 100, 28, 100, "higher")
# Milliseconds relative to the jump peak; negative is before the peak.
RELEASE_TIMING = MetricBenchmark(-120, 60, -350, 250, "center")

JUMP_SHOT = SportBenchmarks(
    metrics={
        "release_angle": RELEASE_ANGLE,
        "elbow_angle_at_release": ELBOW_ANGLE,
        "knee_angle_at_peak": KNEE_ANGLE,
        "jump_height_normalized": JUMP_HEIGHT,
        "stability_index": STABILITY_INDEX,
        "follow_through_score": FOLLOW_THROUGH,
        "release_timing_ms": RELEASE_TIMING,
    },
    weights={
        "release_angle": 0.25,
        "stability_index": 0.20,
        "elbow_angle_at_release": 0.18,
        "follow_through_score": 0.15,
        "knee_angle_at_peak": 0.12,
        "jump_height_normalized": 0.10,
    },
    min_required_metrics=3,
)

FREE_THROW = SportBenchmarks(
    metrics={
        "release_angle": RELEASE_ANGLE,
        "elbow_angle_at_release": ELBOW_ANGLE,
        "knee_angle_push": MetricBenchmark(150, 180, 110, 180, "higher"),
        "stability_index": MetricBenchmark(88, 100, 65, 100, "higher"),
        "follow_through_score": FOLLOW_THROUGH,
        "rhythm_consistency": MetricBenchmark(72, 100, 40, 100, "higher"),
    },
    weights={
        "release_angle": 0.28,
        "elbow_angle_at_release": 0.20,
        "stability_index": 0.22,
        "follow_through_score": 0.15,
        "knee_angle_push": 0.08,
        "rhythm_consistency": 0.07,
    },
    min_required_metrics=2,
)

LAYUP = SportBenchmarks(
    metrics={
        "approach_speed": MetricBenchmark(55, 100, 20, 100, "higher"),
        "takeoff_angle": MetricBenchmark(55, 80, 35, 88, "center"),
        "peak_height": MetricBenchmark(0.05, 0.18, 0.01, 0.30, "higher"),
        "stability_index": MetricBenchmark(68, 100, 35, 100, "higher"),
        "finish_hand_position": MetricBenchmark(78, 110, 55, 125, "higher"),
    },
    weights={
        "approach_speed": 0.20,
        "takeoff_angle": 0.22,
        "peak_height": 0.15,
        "stability_index": 0.22,
        "finish_hand_position": 0.21,
    },
    min_required_metrics=2,
)

DRIBBLING = SportBenchmarks(
    metrics={
        "knee_bend_score": MetricBenchmark(50, 100, 25, 100, "higher"),
        "stance_width": MetricBenchmark(70, 180, 45, 230, "center"),
        "balance_score": MetricBenchmark(55, 100, 30, 100, "higher"),
        "trunk_lean": MetricBenchmark(5, 25, 0, 40, "center"),
    },
    weights={
        "knee_bend_score": 0.35,
        "balance_score": 0.30,
        "stance_width": 0.20,
        "trunk_lean": 0.15,
    },
    min_required_metrics=1,
)

BASKETBALL_BENCHMARKS: Mapping[str, SportBenchmarks] = MappingProxyType(
    {
        "jump_shot": JUMP_SHOT,
        "free_throw": FREE_THROW,
        "layup": LAYUP,
        "dribbling": DRIBBLING,
    }
)


def get_basketball_benchmarks(action: str) -> Optional[SportBenchmarks]:
    return BASKETBALL_BENCHMARKS.get(action)
