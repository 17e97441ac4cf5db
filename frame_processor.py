import logging
import time
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from pose_types import LandmarkIndex, PoseFrame
from smoothing import SmoothingConfig, smooth_landmark_frames

logger = logging.getLogger(__name__)

DEFAULT_FPS = 30.0


@dataclass
class ProcessingConfig:
    enable_smoothing: bool = True
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    min_frames: int = 10
    min_confidence: float = 0.3


@dataclass
class ProcessingMetadata:
    processed_at: float
    processing_time: float
    smoothing_window: int
    smoothing_applied: bool


@dataclass
class ProcessedFrameData:
    smoothed_frames: List[PoseFrame]
    original_frames: List[PoseFrame]
    fps: float
    duration: float
    frame_count: int
    valid_frame_count: int
    average_confidence: float
    metadata: ProcessingMetadata


def validate_frames(frames: Sequence[PoseFrame], config: Optional[ProcessingConfig] = None) -> Tuple[bool, List[str]]:
    """Returns (is_valid, issues); any issue makes the sequence invalid."""
    config = config or ProcessingConfig()
    issues: List[str] = []
    if not frames:
        issues.append("No frames provided")
        return False, issues

    if len(frames) < config.min_frames:
        issues.append(f"Insufficient frames: {len(frames)} < {config.min_frames} required")

    with_landmarks = sum(1 for f in frames if f.has_landmarks)
    if with_landmarks == 0:
        issues.append("No frames contain landmarks")
        return False, issues

    ratio = with_landmarks / len(frames)
    if ratio < 0.5:
        issues.append(f"Low landmark detection rate: {ratio * 100:.1f}%")

    avg_confidence = sum(f.confidence for f in frames) / len(frames)
    if avg_confidence < config.min_confidence:
        issues.append(f"Low average confidence: {avg_confidence * 100:.1f}%")

    return len(issues) == 0, issues


def calculate_fps(frames: Sequence[PoseFrame], video_duration: float) -> float:
    if not frames or video_duration <= 0:
        logger.warning("Cannot calculate FPS: invalid input, using %.0f", DEFAULT_FPS)
        return DEFAULT_FPS
    fps = len(frames) / video_duration
    if fps < 10 or fps > 120:
        logger.warning("Unusual FPS calculated: %.2f", fps)
    return fps


def calculate_fps_from_timestamps(frames: Sequence[PoseFrame]) -> float:
    if len(frames) < 2:
        return DEFAULT_FPS
    # Gaps of a second or more are treated as dropouts.
    deltas = [
        b.timestamp - a.timestamp
        for a, b in zip(frames, frames[1:])
        if 0 < b.timestamp - a.timestamp < 1
    ]
    if not deltas:
        return DEFAULT_FPS
    return round(1.0 / (sum(deltas) / len(deltas)), 2)


def process_landmark_frames(
    frames: Sequence[PoseFrame],
    video_duration: float,
    config: Optional[ProcessingConfig] = None,
) -> Optional[ProcessedFrameData]:
    config = config or ProcessingConfig()
    started = time.perf_counter()
    logger.debug("Processing %d frames over %.2fs", len(frames), video_duration)

    is_valid, issues = validate_frames(frames, config)
    if not is_valid:
        logger.error("Frame validation failed: %s", "; ".join(issues))
        return None

    fps = calculate_fps(frames, video_duration)

    window = config.smoothing.window_size
    if config.enable_smoothing and len(frames) >= window:
        smoothed = smooth_landmark_frames(frames, config.smoothing)
        smoothing_applied = True
    else:
        smoothed = [replace(f, landmarks=list(f.landmarks)) for f in frames]
        smoothing_applied = False
        logger.debug("Smoothing skipped (disabled or insufficient frames)")

    valid_count = sum(1 for f in frames if f.confidence >= config.min_confidence and f.has_landmarks)
    avg_confidence = sum(f.confidence for f in frames) / len(frames)
    elapsed_ms = (time.perf_counter() - started) * 1000.0

    result = ProcessedFrameData(
        smoothed_frames=smoothed,
        original_frames=list(frames),
        fps=fps,
        duration=video_duration,
        frame_count=len(frames),
        valid_frame_count=valid_count,
        average_confidence=avg_confidence,
        metadata=ProcessingMetadata(
            processed_at=time.time(),
            processing_time=elapsed_ms,
            smoothing_window=window,
            smoothing_applied=smoothing_applied,
        ),
    )
    logger.info(
        "Processed %d frames (%d valid) at %.1f fps, avg confidence %.1f%% in %.1fms",
        result.frame_count,
        valid_count,
        fps,
        avg_confidence * 100,
        elapsed_ms,
    )
    return result


def extract_hip_center_y(frames: Sequence[PoseFrame]) -> List[float]:
    series = []
    for frame in frames:
        left = frame.landmark(LandmarkIndex.LEFT_HIP)
        right = frame.landmark(LandmarkIndex.RIGHT_HIP)
        series.append(0.0 if left is None or right is None else (left.y + right.y) / 2.0)
    return series


def extract_wrist_y(frames: Sequence[PoseFrame], hand: str = "right") -> List[float]:
    index = LandmarkIndex.LEFT_WRIST if hand == "left" else LandmarkIndex.RIGHT_WRIST
    return [_y_or_zero(frame, index) for frame in frames]


def extract_shoulder_y(frames: Sequence[PoseFrame], side: str = "right") -> List[float]:
    index = LandmarkIndex.LEFT_SHOULDER if side == "left" else LandmarkIndex.RIGHT_SHOULDER
    return [_y_or_zero(frame, index) for frame in frames]


def _y_or_zero(frame: PoseFrame, index: int) -> float:
    lm = frame.landmark(index)
    return 0.0 if lm is None else lm.y
