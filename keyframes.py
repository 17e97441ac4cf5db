import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from frame_processor import extract_hip_center_y
from pose_types import Keyframes, LandmarkIndex, PoseFrame
from smoothing import calculate_smoothed_velocity, moving_average

logger = logging.getLogger(__name__)


@dataclass
class KeyframeConfig:
    min_frames: int = 15
    velocity_threshold: float = 0.02
    min_visibility: float = 0.5
    fps: float = 30.0


@dataclass
class KeyframeConfidence:
    peak_jump: float = 0.0
    release: float = 0.0
    start: float = 0.0
    end: float = 0.0


@dataclass
class KeyframeDebug:
    hip_y_values: List[float] = field(default_factory=list)
    wrist_y_velocity: List[float] = field(default_factory=list)
    detection_method: str = "velocity-based"


@dataclass
class KeyframeDetectionResult:
    keyframes: Keyframes
    confidence: KeyframeConfidence
    debug: KeyframeDebug


def _visibility(frame: PoseFrame, index: int) -> float:
    lm = frame.landmark(index)
    if lm is None:
        return 0.0
    return 1.0 if lm.visibility is None else lm.visibility


def detect_peak_jump_frame(
    frames: Sequence[PoseFrame], config: Optional[KeyframeConfig] = None
) -> Tuple[Optional[int], float, List[float]]:
    """Frame where the hip center is highest (smallest image y).

    Returns (frame_index, confidence, smoothed_hip_y).
    """
    config = config or KeyframeConfig()
    if len(frames) < config.min_frames:
        logger.warning("Insufficient frames for peak jump detection")
        return None, 0.0, []

    hip_y: List[float] = []
    valid = 0
    for frame in frames:
        left = frame.landmark(LandmarkIndex.LEFT_HIP)
        right = frame.landmark(LandmarkIndex.RIGHT_HIP)
        if (
            left is not None
            and right is not None
            and _visibility(frame, LandmarkIndex.LEFT_HIP) >= config.min_visibility
            and _visibility(frame, LandmarkIndex.RIGHT_HIP) >= config.min_visibility
        ):
            hip_y.append((left.y + right.y) / 2.0)
            valid += 1
        else:
            # carry forward
            hip_y.append(hip_y[-1] if hip_y else 0.5)

    if valid == 0:
        logger.warning("No valid hip landmarks found")
        return None, 0.0, hip_y

    smoothed = moving_average(hip_y, 3, False)
    min_y = float("inf")
    peak = 0
    for i, y in enumerate(smoothed):
        if y < min_y:
            min_y = y
            peak = i

    avg_y = sum(smoothed) / len(smoothed)
    distinctiveness = (avg_y - min_y) / avg_y if avg_y else 0.0
    confidence = min(1.0, distinctiveness * 2) * (valid / len(frames))
    logger.debug("Peak jump at frame %d (min y %.4f, avg y %.4f, confidence %.3f)", peak, min_y, avg_y, confidence)
    return peak, confidence, smoothed


def detect_release_frame(
    frames: Sequence[PoseFrame], config: Optional[KeyframeConfig] = None
) -> Tuple[Optional[int], float, List[float]]:
    """Shooting-hand release from the right wrist's vertical velocity.

    Searches the 30%-85% span of the clip for a rise-to-fall crossing,
    scoring candidates by wrist height and velocity change. Falls back to
    the wrist's highest point. Returns (frame_index, confidence, velocity).
    """
    config = config or KeyframeConfig()
    n = len(frames)
    if n < config.min_frames:
        logger.warning("Insufficient frames for release detection")
        return None, 0.0, []

    wrist_y = []
    for frame in frames:
        wrist = frame.landmark(LandmarkIndex.RIGHT_WRIST)
        wrist_y.append(0.0 if wrist is None else wrist.y)
    smoothed = moving_average(wrist_y, 3, False)
    velocity = calculate_smoothed_velocity(smoothed, config.fps, 3)
    if not velocity:
        return None, 0.0, []

    search_start = int(n * 0.3)
    search_end = int(n * 0.85)
    avg_wrist_y = sum(smoothed) / len(smoothed)

    release: Optional[int] = None
    best_score = float("-inf")
    for i in range(search_start, search_end - 1):
        prev_vel = velocity[i - 1] if i >= 1 else 0.0
        next_vel = velocity[i + 1] if i + 1 < len(velocity) else 0.0
        if prev_vel < 0 < next_vel:
            height_score = (avg_wrist_y - smoothed[i]) / avg_wrist_y if avg_wrist_y else 0.0
            score = height_score + abs(next_vel - prev_vel) * 5
            if score > best_score:
                best_score = score
                release = i

    if release is None:
        min_wrist_y = float("inf")
        for i in range(search_start, search_end):
            if smoothed[i] < min_wrist_y:
                min_wrist_y = smoothed[i]
                release = i
        logger.debug("No velocity crossing, using wrist peak as release frame")

    validity = sum(1 for f in frames if _visibility(f, LandmarkIndex.RIGHT_WRIST) >= config.min_visibility) / n
    if release is None:
        confidence = 0.0
    else:
        confidence = min(1.0, validity * (0.8 + best_score * 0.2 if best_score > 0 else 0.5))
    logger.debug("Release frame %s (confidence %.3f)", release, confidence)
    return release, confidence, velocity


def _hip_velocity(frames: Sequence[PoseFrame], fps: float) -> List[float]:
    smoothed = moving_average(extract_hip_center_y(frames), 3, False)
    return calculate_smoothed_velocity(smoothed, fps, 3)


def detect_start_frame(frames: Sequence[PoseFrame], config: Optional[KeyframeConfig] = None) -> Tuple[Optional[int], float]:
    config = config or KeyframeConfig()
    n = len(frames)
    if n < config.min_frames:
        logger.warning("Insufficient frames for start detection")
        return None, 0.0

    velocity = _hip_velocity(frames, config.fps)
    if not velocity:
        return None, 0.0

    search_end = int(n * 0.5)
    start: Optional[int] = None
    for i in range(2, search_end):
        avg_before = (velocity[i - 2] + velocity[i - 1]) / 2.0
        if abs(velocity[i] - avg_before) > config.velocity_threshold:
            start = i
            break

    if start is None and search_end > 0:
        avg_speed = sum(abs(v) for v in velocity[:search_end]) / search_end
        for i in range(search_end):
            if abs(velocity[i]) > avg_speed * 1.5:
                # back off to just before motion
                start = max(0, i - 2)
                break

    if start is None:
        start = 0
        logger.debug("No clear start detected, using first frame")

    confidence = 0.7 if start > 0 else 0.3
    return start, confidence


def detect_end_frame(
    frames: Sequence[PoseFrame],
    peak_jump_frame: Optional[int],
    config: Optional[KeyframeConfig] = None,
) -> Tuple[Optional[int], float]:
    config = config or KeyframeConfig()
    n = len(frames)
    if n < 10:
        return None, 0.0

    velocity = _hip_velocity(frames, config.fps)
    search_start = peak_jump_frame if peak_jump_frame is not None else int(n * 0.5)

    end: Optional[int] = None
    for i in range(search_start + 5, n - 2):
        recent = velocity[max(search_start, i - 5):i + 1]
        if recent and sum(abs(v) for v in recent) / len(recent) < config.velocity_threshold:
            end = i
            break

    if end is None:
        end = n - 1

    confidence = 0.7 if end < n - 1 else 0.4
    return end, confidence


def detect_keyframes(
    frames: Sequence[PoseFrame],
    video_duration: float,
    config: Optional[KeyframeConfig] = None,
) -> KeyframeDetectionResult:
    config = config or KeyframeConfig()
    # The clip's own frame rate overrides the configured default.
    if video_duration > 0:
        config = replace(config, fps=len(frames) / video_duration)
    logger.debug("Detecting keyframes in %d frames at %.2f fps", len(frames), config.fps)

    peak, peak_conf, hip_y = detect_peak_jump_frame(frames, config)
    release, release_conf, wrist_velocity = detect_release_frame(frames, config)
    start, start_conf = detect_start_frame(frames, config)
    end, end_conf = detect_end_frame(frames, peak, config)

    result = KeyframeDetectionResult(
        keyframes=Keyframes(start=start, peak_jump=peak, release=release, end=end),
        confidence=KeyframeConfidence(peak_jump=peak_conf, release=release_conf, start=start_conf, end=end_conf),
        debug=KeyframeDebug(hip_y_values=hip_y, wrist_y_velocity=wrist_velocity),
    )
    logger.info("Keyframes: start=%s peak=%s release=%s end=%s", start, peak, release, end)
    return result


def validate_keyframes(keyframes: Keyframes) -> Tuple[bool, List[str]]:
    issues: List[str] = []
    if keyframes.start is not None and keyframes.peak_jump is not None:
        if keyframes.start > keyframes.peak_jump:
            issues.append("Start frame detected after peak jump")
    if keyframes.peak_jump is not None and keyframes.end is not None:
        if keyframes.peak_jump > keyframes.end:
            issues.append("Peak jump detected after end frame")
    if keyframes.release is not None and keyframes.peak_jump is not None:
        if abs(keyframes.release - keyframes.peak_jump) > 15:
            issues.append("Release frame far from peak jump (unusual for basketball shot)")
    return len(issues) == 0, issues
