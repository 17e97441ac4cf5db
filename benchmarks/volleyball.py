from types import MappingProxyType
from typing import Mapping, Optional

from benchmarks.base import MetricBenchmark, SportBenchmarks

SPIKE = SportBenchmarks(
    metrics={
        "elbow_at_contact": MetricBenchmark(155, 177, 130, 180, "higher"),
        "contact_height": MetricBenchmark(85, 115, 65, 130, "higher"),
        "arm_swing_score": MetricBenchmark(65, 100, 30, 100, "higher"),
        "jump_height": MetricBenchmark(0.07, 0.22, 0.01, 0.35, "higher"),
        "trunk_rotation": MetricBenchmark(20, 65, 5, 90, "center"),
        "body_alignment": MetricBenchmark(68, 100, 35, 100, "higher"),
        "stability": MetricBenchmark(70, 100, 35, 100, "higher"),
    },
    weights={
        "elbow_at_contact": 0.22,
        "contact_height": 0.22,
        "arm_swing_score": 0.18,
        "jump_height": 0.16,
        "trunk_rotation": 0.10,
        "body_alignment": 0.07,
        "stability": 0.05,
    },
    min_required_metrics=2,
)

SERVE = SportBenchmarks(
    metrics={
        "elbow_at_contact": MetricBenchmark(155, 177, 125, 180, "higher"),
        "contact_height": MetricBenchmark(78, 110, 60, 125, "higher"),
        "trunk_rotation": MetricBenchmark(18, 55, 5, 80, "center"),
        "follow_through": MetricBenchmark(70, 100, 35, 100, "higher"),
        "stability": MetricBenchmark(78, 100, 45, 100, "higher"),
        "arm_swing_score": MetricBenchmark(55, 100, 20, 100, "higher"),
    },
    weights={
        "elbow_at_contact": 0.25,
        "contact_height": 0.20,
        "trunk_rotation": 0.15,
        "follow_through": 0.18,
        "stability": 0.12,
        "arm_swing_score": 0.10,
    },
    min_required_metrics=2,
)

BLOCK = SportBenchmarks(
    metrics={
        "jump_height": MetricBenchmark(0.05, 0.20, 0.01, 0.32, "higher"),
        "arm_extension": MetricBenchmark(155, 177, 120, 180, "higher"),
        "hand_height": MetricBenchmark(85, 115, 65, 130, "higher"),
        "hand_symmetry": MetricBenchmark(75, 100, 40, 100, "higher"),
        "body_alignment": MetricBenchmark(65, 100, 30, 100, "higher"),
    },
    weights={
        "jump_height": 0.25,
        "arm_extension": 0.28,
        "hand_height": 0.22,
        "hand_symmetry": 0.15,
        "body_alignment": 0.10,
    },
    min_required_metrics=2,
)

SET = SportBenchmarks(
    metrics={
        "hand_symmetry": MetricBenchmark(72, 100, 40, 100, "higher"),
        "elbow_angle": MetricBenchmark(88, 138, 60, 165, "center"),
        "contact_height": MetricBenchmark(80, 110, 55, 125, "higher"),
        "body_alignment": MetricBenchmark(70, 100, 35, 100, "higher"),
        "stability": MetricBenchmark(72, 100, 40, 100, "higher"),
    },
    weights={
        "hand_symmetry": 0.30,
        "elbow_angle": 0.25,
        "contact_height": 0.20,
        "body_alignment": 0.15,
        "stability": 0.10,
    },
    min_required_metrics=2,
)

VOLLEYBALL_BENCHMARKS: Mapping[str, SportBenchmarks] = MappingProxyType(
    {
        "spike": SPIKE,
        "serve": SERVE,
        "block": BLOCK,
        "set": SET,
    }
)


def get_volleyball_benchmarks(action: str) -> Optional[SportBenchmarks]:
    return VOLLEYBALL_BENCHMARKS.get(action)
