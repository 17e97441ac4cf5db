import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from benchmarks import (
    SportBenchmarks,
    get_badminton_benchmarks,
    get_basketball_benchmarks,
    get_volleyball_benchmarks,
)

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkEntry:
    sport: str
    lookup: Callable[[str], Optional[SportBenchmarks]]
    actions: List[str]


def get_benchmark_entries() -> List[BenchmarkEntry]:
    return [
        BenchmarkEntry("basketball", get_basketball_benchmarks, ["jump_shot", "free_throw", "layup", "dribbling"]),
        BenchmarkEntry("volleyball", get_volleyball_benchmarks, ["spike", "serve", "block", "set"]),
        BenchmarkEntry("badminton", get_badminton_benchmarks, ["smash", "clear", "drop_shot", "serve"]),
    ]


_ENTRIES: Dict[str, BenchmarkEntry] = {entry.sport: entry for entry in get_benchmark_entries()}


def get_benchmarks(sport: str, action: str) -> Optional[SportBenchmarks]:
    entry = _ENTRIES.get(sport)
    if entry is None:
        logger.warning("No benchmarks for sport: %s", sport)
        return None
    benchmarks = entry.lookup(action)
    if benchmarks is None:
        logger.warning("No benchmarks for %s action: %s", sport, action)
    return benchmarks


def get_supported_actions(sport: str) -> List[str]:
    entry = _ENTRIES.get(sport)
    return list(entry.actions) if entry else []


def get_benchmark_sports() -> List[str]:
    return list(_ENTRIES)
