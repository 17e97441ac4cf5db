import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from sports import (
    MetricCalculationInput,
    MetricResult,
    calculate_badminton_metrics,
    calculate_basketball_metrics,
    calculate_volleyball_metrics,
)

logger = logging.getLogger(__name__)

MetricCalculator = Callable[[MetricCalculationInput], MetricResult]


@dataclass
class SportEntry:
    name: str
    calculator: MetricCalculator


def get_sport_entries() -> List[SportEntry]:
    return [
        SportEntry("basketball", calculate_basketball_metrics),
        SportEntry("volleyball", calculate_volleyball_metrics),
        SportEntry("badminton", calculate_badminton_metrics),
    ]


_REGISTRY: Dict[str, SportEntry] = {entry.name: entry for entry in get_sport_entries()}


def get_metric_calculator(sport: str) -> Optional[MetricCalculator]:
    entry = _REGISTRY.get(sport)
    if entry is None:
        logger.warning("No calculator found for sport: %s", sport)
        return None
    return entry.calculator


def calculate_sport_metrics(sport: str, data: MetricCalculationInput) -> MetricResult:
    calculator = get_metric_calculator(sport)
    if calculator is None:
        logger.error("Cannot calculate metrics for unsupported sport: %s", sport)
        return {}
    started = time.perf_counter()
    try:
        metrics = calculator(data)
    except Exception:
        logger.exception("Error calculating %s metrics", sport)
        return {}
    logger.info("Calculated %s metrics in %.2fms", sport, (time.perf_counter() - started) * 1000.0)
    return metrics


def is_sport_supported(sport: str) -> bool:
    return sport in _REGISTRY


def get_supported_sports() -> List[str]:
    return list(_REGISTRY)
