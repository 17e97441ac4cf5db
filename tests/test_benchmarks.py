import pytest

from benchmark_registry import get_benchmark_entries, get_benchmark_sports, get_benchmarks, get_supported_actions
from benchmarks import BASKETBALL_BENCHMARKS
from benchmarks.base import PREFERENCES, MetricBenchmark, SportBenchmarks

ALL_PAIRS = [(entry.sport, action) for entry in get_benchmark_entries() for action in entry.actions]


def test_sports_and_actions():
    assert get_benchmark_sports() == ["basketball", "volleyball", "badminton"]
    assert get_supported_actions("volleyball") == ["spike", "serve", "block", "set"]
    assert get_supported_actions("tennis") == []


def test_unknown_lookups_return_none(caplog):
    assert get_benchmarks("tennis", "serve") is None
    assert get_benchmarks("basketball", "dunk") is None
    assert "No benchmarks" in caplog.text


@pytest.mark.parametrize("sport,action", ALL_PAIRS)
def test_benchmark_tables_are_consistent(sport, action):
    benchmarks = get_benchmarks(sport, action)
    assert benchmarks is not None
    assert set(benchmarks.weights) <= set(benchmarks.metrics)
    assert sum(benchmarks.weights.values()) == pytest.approx(1.0)
    assert 1 <= benchmarks.min_required_metrics <= len(benchmarks.metrics)
    for bench in benchmarks.metrics.values():
        assert bench.acceptable_min <= bench.ideal_min <= bench.ideal_max <= bench.acceptable_max
        assert bench.preference in PREFERENCES


def test_jump_shot_table():
    benchmarks = get_benchmarks("basketball", "jump_shot")
    assert benchmarks.min_required_metrics == 3
    assert benchmarks.metrics["elbow_angle_at_release"].ideal_min == 152
    # Timing is scored but carries no weight.
    assert "release_timing_ms" in benchmarks.metrics
    assert "release_timing_ms" not in benchmarks.weights


def test_returned_tables_reject_mutation():
    benchmarks = get_benchmarks("basketball", "jump_shot")
    with pytest.raises(TypeError):
        benchmarks.weights["release_angle"] = 0.0
    with pytest.raises(TypeError):
        del benchmarks.metrics["release_angle"]
    with pytest.raises(TypeError):
        BASKETBALL_BENCHMARKS["jump_shot"] = None

    fresh = get_benchmarks("basketball", "jump_shot")
    assert fresh.weights["release_angle"] == 0.25
    assert "release_angle" in fresh.metrics


def test_table_does_not_alias_caller_dicts():
    metrics = {"stability": MetricBenchmark(70, 100, 40, 100, "higher")}
    weights = {"stability": 1.0}
    table = SportBenchmarks(metrics=metrics, weights=weights)

    weights["stability"] = 0.0
    metrics.clear()
    assert table.weights["stability"] == 1.0
    assert "stability" in table.metrics


@pytest.mark.parametrize(
    "args",
    [
        (60, 50, 0, 100, "center"),
        (40, 60, 45, 100, "center"),
        (40, 60, 0, 55, "center"),
        (40, 60, 0, 100, "middle"),
    ],
)
def test_malformed_metric_benchmark_is_rejected(args):
    with pytest.raises(ValueError):
        MetricBenchmark(*args)


def test_degenerate_ranges_are_allowed():
    bench = MetricBenchmark(100, 100, 100, 100, "higher")
    assert bench.ideal_min == bench.acceptable_max
