import logging
import time
from typing import Callable, Dict, List, Mapping, Optional

from flaws import (
    FlawDetectionResult,
    detect_badminton_flaws,
    detect_basketball_flaws,
    detect_volleyball_flaws,
    has_injury_risk,
)
from flaws.base import unsupported_result
from pose_types import Keyframes

logger = logging.getLogger(__name__)

FlawDetector = Callable[..., FlawDetectionResult]

_DETECTORS: Dict[str, FlawDetector] = {
    "basketball": detect_basketball_flaws,
    "volleyball": detect_volleyball_flaws,
    "badminton": detect_badminton_flaws,
}


def get_flaw_detector(sport: str) -> Optional[FlawDetector]:
    detector = _DETECTORS.get(sport)
    if detector is None:
        logger.warning("No flaw detector found for sport: %s", sport)
    return detector


def detect_flaws(
    sport: str,
    metrics: Mapping[str, Optional[float]],
    action: str,
    keyframes: Optional[Keyframes] = None,
) -> FlawDetectionResult:
    detector = get_flaw_detector(sport)
    if detector is None:
        return unsupported_result(f"Flaw detection for {sport} is not supported.")

    started = time.perf_counter()
    try:
        result = detector(metrics, action, keyframes)
    except Exception:
        logger.exception("Error detecting flaws for %s", sport)
        return unsupported_result("An error occurred during flaw detection.")

    logger.info(
        "Detected %d flaws in %.2fms", len(result.flaws), (time.perf_counter() - started) * 1000.0
    )
    return result


def is_flaw_detection_supported(sport: str) -> bool:
    return sport in _DETECTORS


def get_supported_sports_for_flaws() -> List[str]:
    return list(_DETECTORS)


__all__ = [
    "detect_flaws",
    "get_flaw_detector",
    "get_supported_sports_for_flaws",
    "has_injury_risk",
    "is_flaw_detection_supported",
]
