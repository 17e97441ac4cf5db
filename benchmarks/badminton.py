from types import MappingProxyType
from typing import Mapping, Optional

from benchmarks.base import MetricBenchmark, SportBenchmarks

SMASH = SportBenchmarks(
    metrics={
        "elbow_at_contact": MetricBenchmark(155, 177, 125, 180, "higher"),
        "contact_height": MetricBenchmark(90, 125, 65, 135, "higher"),
        "trunk_rotation": MetricBenchmark(22, 65, 5, 90, "center"),
        "wrist_speed": MetricBenchmark(60, 100, 20, 100, "higher"),
        "jump_height": MetricBenchmark(0.04, 0.20, 0.00, 0.35, "higher"),
        "follow_through": MetricBenchmark(65, 100, 25, 100, "higher"),
        "body_alignment": MetricBenchmark(62, 100, 30, 100, "higher"),
    },
    weights={
        "elbow_at_contact": 0.22,
        "contact_height": 0.20,
        "trunk_rotation": 0.15,
        "wrist_speed": 0.18,
        "jump_height": 0.10,
        "follow_through": 0.10,
        "body_alignment": 0.05,
    },
    min_required_metrics=2,
)

CLEAR = SportBenchmarks(
    metrics={
        "elbow_at_contact": MetricBenchmark(150, 177, 120, 180, "higher"),
        "contact_height": MetricBenchmark(82, 118, 60, 132, "higher"),
        "trunk_rotation": MetricBenchmark(18, 60, 5, 85, "center"),
        "follow_through": MetricBenchmark(70, 100, 30, 100, "higher"),
        "body_alignment": MetricBenchmark(60, 100, 28, 100, "higher"),
        "wrist_speed": MetricBenchmark(50, 100, 15, 100, "higher"),
    },
    weights={
        "elbow_at_contact": 0.25,
        "contact_height": 0.22,
        "trunk_rotation": 0.15,
        "follow_through": 0.18,
        "body_alignment": 0.10,
        "wrist_speed": 0.10,
    },
    min_required_metrics=2,
)

DROP_SHOT = SportBenchmarks(
    metrics={
        "contact_height": MetricBenchmark(65, 98, 45, 118, "center"),
        "elbow_angle": MetricBenchmark(118, 162, 85, 178, "center"),
        "trunk_rotation": MetricBenchmark(10, 45, 2, 70, "center"),
        "body_alignment": MetricBenchmark(65, 100, 35, 100, "higher"),
        "stability": MetricBenchmark(70, 100, 38, 100, "higher"),
    },
    weights={
        "contact_height": 0.25,
        "elbow_angle": 0.28,
        "trunk_rotation": 0.18,
        "body_alignment": 0.15,
        "stability": 0.14,
    },
    min_required_metrics=2,
)

SERVE = SportBenchmarks(
    metrics={
        "stability": MetricBenchmark(82, 100, 50, 100, "higher"),
        "elbow_at_contact": MetricBenchmark(120, 165, 85, 178, "center"),
        "follow_through": MetricBenchmark(60, 100, 25, 100, "higher"),
        "body_alignment": MetricBenchmark(70, 100, 38, 100, "higher"),
    },
    weights={
        "stability": 0.30,
        "elbow_at_contact": 0.25,
        "follow_through": 0.25,
        "body_alignment": 0.20,
    },
    min_required_metrics=2,
)

BADMINTON_BENCHMARKS: Mapping[str, SportBenchmarks] = MappingProxyType(
    {
        "smash": SMASH,
        "clear": CLEAR,
        "drop_shot": DROP_SHOT,
        "serve": SERVE,
    }
)


def get_badminton_benchmarks(action: str) -> Optional[SportBenchmarks]:
    return BADMINTON_BENCHMARKS.get(action)
