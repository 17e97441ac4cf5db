import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Sequence

from benchmark_registry import get_benchmarks
from flaw_registry import detect_flaws
from flaws.base import FlawDetectionResult, unsupported_result
from frame_processor import ProcessedFrameData, ProcessingConfig, process_landmark_frames, validate_frames
from keyframes import KeyframeConfig, KeyframeDetectionResult, detect_keyframes, validate_keyframes
from pose_types import PoseFrame
from scoring import (
    DEFAULT_GRADE_CURVE,
    ScoringResult,
    empty_result,
    get_letter_grade,
    get_performance_level,
    get_strongest_metrics,
    get_weakest_metrics,
    score,
)
from sport_registry import calculate_sport_metrics
from sports.base import MetricCalculationInput, MetricResult

logger = logging.getLogger(__name__)


@dataclass
class AnalysisConfig:
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    keyframes: KeyframeConfig = field(default_factory=KeyframeConfig)
    grade_curve: float = DEFAULT_GRADE_CURVE
    user_height_cm: Optional[float] = None


@dataclass
class AnalysisResult:
    sport: str
    action: str
    processed: Optional[ProcessedFrameData] = None
    keyframe_result: Optional[KeyframeDetectionResult] = None
    keyframe_issues: List[str] = field(default_factory=list)
    metrics: MetricResult = field(default_factory=dict)
    scoring: ScoringResult = field(default_factory=empty_result)
    flaws: FlawDetectionResult = field(default_factory=FlawDetectionResult)
    issues: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.processed is not None and not self.issues

    def to_dict(self) -> Dict:
        scoring = self.scoring
        out: Dict = {
            "sport": self.sport,
            "action": self.action,
            "issues": list(self.issues),
            "metrics": dict(self.metrics),
            "score": {
                "overall": scoring.overall_score,
                "letter_grade": get_letter_grade(scoring.overall_score),
                "performance_level": get_performance_level(scoring.overall_score),
                "confidence": scoring.confidence,
                "metrics_included": scoring.metrics_included,
                "metrics_total": scoring.metrics_total,
                "breakdown": dict(scoring.breakdown),
                "weakest": get_weakest_metrics(scoring.breakdown),
                "strongest": get_strongest_metrics(scoring.breakdown),
            },
            "flaws": self.flaws.to_dict(),
            "keyframes": None,
            "keyframe_issues": list(self.keyframe_issues),
            "processing": None,
        }
        if self.keyframe_result is not None:
            out["keyframes"] = asdict(self.keyframe_result.keyframes)
            out["keyframe_confidence"] = asdict(self.keyframe_result.confidence)
        if self.processed is not None:
            out["processing"] = {
                "fps": self.processed.fps,
                "duration": self.processed.duration,
                "frame_count": self.processed.frame_count,
                "valid_frame_count": self.processed.valid_frame_count,
                "average_confidence": self.processed.average_confidence,
                "smoothing_applied": self.processed.metadata.smoothing_applied,
            }
        return out


def analyze_session(
    frames: Sequence[PoseFrame],
    sport: str,
    action: str,
    video_duration: float,
    config: Optional[AnalysisConfig] = None,
) -> AnalysisResult:
    """Frames -> keyframes -> metrics -> score and flaws for one clip."""
    config = config or AnalysisConfig()
    started = time.perf_counter()
    result = AnalysisResult(sport=sport, action=action)

    benchmarks = get_benchmarks(sport, action)
    if benchmarks is None:
        result.issues.append(f"Unsupported sport/action: {sport}/{action}")
        result.flaws = unsupported_result(f"Flaw detection for {sport} {action} is not supported.")
        return result

    processed = process_landmark_frames(frames, video_duration, config.processing)
    if processed is None:
        _, issues = validate_frames(frames, config.processing)
        result.issues.extend(issues)
        result.flaws = unsupported_result("Not enough usable pose data to detect flaws.")
        return result
    result.processed = processed

    keyframe_result = detect_keyframes(processed.smoothed_frames, video_duration, config.keyframes)
    _, keyframe_issues = validate_keyframes(keyframe_result.keyframes)
    result.keyframe_result = keyframe_result
    result.keyframe_issues = keyframe_issues
    for issue in keyframe_issues:
        logger.warning("Keyframe check: %s", issue)

    data = MetricCalculationInput(
        smoothed_frames=processed.smoothed_frames,
        keyframes=keyframe_result.keyframes,
        fps=processed.fps,
        action=action,
        user_height_cm=config.user_height_cm,
    )
    result.metrics = calculate_sport_metrics(sport, data)
    result.scoring = score(result.metrics, benchmarks, config.grade_curve)
    result.flaws = detect_flaws(sport, result.metrics, action, keyframe_result.keyframes)

    logger.info(
        "Analyzed %s/%s: score %.0f (confidence %.2f), %d flaws in %.1fms",
        sport,
        action,
        result.scoring.overall_score,
        result.scoring.confidence,
        len(result.flaws.flaws),
        (time.perf_counter() - started) * 1000.0,
    )
    return result
