from benchmarks.badminton import BADMINTON_BENCHMARKS, get_badminton_benchmarks
from benchmarks.base import MetricBenchmark, SportBenchmarks
from benchmarks.basketball import BASKETBALL_BENCHMARKS, get_basketball_benchmarks
from benchmarks.volleyball import VOLLEYBALL_BENCHMARKS, get_volleyball_benchmarks

__all__ = [
    "MetricBenchmark",
    "SportBenchmarks",
    "BASKETBALL_BENCHMARKS",
    "VOLLEYBALL_BENCHMARKS",
    "BADMINTON_BENCHMARKS",
    "get_basketball_benchmarks",
    "get_volleyball_benchmarks",
    "get_badminton_benchmarks",
]
