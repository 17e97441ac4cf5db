from dataclasses import dataclass
from typing import Optional, Sequence

from pose_types import Keyframes, LandmarkIndex, NormalizedPoint, PoseFrame
from velocity import calculate_vertical_velocity_physics

MIN_VISIBILITY = 0.5
# 1% of frame height; anything smaller is tracking noise.
MIN_JUMP_HEIGHT = 0.01
ESTIMATED_BODY_HEIGHT = 0.6
TAKEOFF_VELOCITY = 0.5
LANDING_VELOCITY = 0.3
LANDING_MIN_OFFSET = 3


@dataclass(frozen=True)
class HipCenterResult:
    position: NormalizedPoint
    is_valid: bool
    confidence: float


@dataclass(frozen=True)
class JumpHeightResult:
    height_normalized: float
    height_percentage: float
    confidence: float
    is_valid: bool


@dataclass(frozen=True)
class JumpAnalysis:
    height_normalized: float = 0.0
    height_percentage: float = 0.0
    takeoff_frame: Optional[int] = None
    peak_frame: Optional[int] = None
    landing_frame: Optional[int] = None
    flight_time: Optional[float] = None
    peak_velocity: float = 0.0
    confidence: float = 0.0
    is_valid: bool = False


_INVALID_HEIGHT = JumpHeightResult(0.0, 0.0, 0.0, False)


def calculate_hip_center(
    left_hip: Optional[NormalizedPoint], right_hip: Optional[NormalizedPoint]
) -> HipCenterResult:
    """Hip midpoint as a center-of-mass proxy; ankles are too distorted by foot motion."""
    origin = NormalizedPoint(0.0, 0.0)
    if left_hip is None or right_hip is None:
        return HipCenterResult(origin, False, 0.0)

    vis_left = 1.0 if left_hip.visibility is None else left_hip.visibility
    vis_right = 1.0 if right_hip.visibility is None else right_hip.visibility
    confidence = min(vis_left, vis_right)
    if vis_left < MIN_VISIBILITY or vis_right < MIN_VISIBILITY:
        return HipCenterResult(origin, False, confidence)

    position = NormalizedPoint(
        (left_hip.x + right_hip.x) / 2.0,
        (left_hip.y + right_hip.y) / 2.0,
        ((left_hip.z or 0.0) + (right_hip.z or 0.0)) / 2.0,
        confidence,
    )
    return HipCenterResult(position, True, confidence)


def hip_center_from_frame(frame: PoseFrame) -> HipCenterResult:
    return calculate_hip_center(frame.landmark(LandmarkIndex.LEFT_HIP), frame.landmark(LandmarkIndex.RIGHT_HIP))


def find_peak_jump_frame(frames: Sequence[PoseFrame]) -> Optional[int]:
    peak = None
    min_y = float("inf")
    for i, frame in enumerate(frames):
        hip = hip_center_from_frame(frame)
        if hip.is_valid and hip.position.y < min_y:
            min_y = hip.position.y
            peak = i
    return peak


def find_baseline_frame(frames: Sequence[PoseFrame]) -> Optional[int]:
    # Standing frame: lowest hip (largest y) within the first 20% of the clip.
    if len(frames) < 5:
        return None
    baseline = None
    max_y = float("-inf")
    for i in range(int(len(frames) * 0.2)):
        hip = hip_center_from_frame(frames[i])
        if hip.is_valid and hip.position.y > max_y:
            max_y = hip.position.y
            baseline = i
    return baseline


def estimate_jump_height(
    frames: Sequence[PoseFrame],
    peak_frame: Optional[int],
    baseline_frame: Optional[int],
) -> JumpHeightResult:
    if not frames:
        return _INVALID_HEIGHT

    baseline = baseline_frame if baseline_frame is not None else 0
    peak = peak_frame if peak_frame is not None else find_peak_jump_frame(frames)
    if peak is None or not (0 <= baseline < len(frames)) or not (0 <= peak < len(frames)):
        return _INVALID_HEIGHT

    baseline_hip = hip_center_from_frame(frames[baseline])
    peak_hip = hip_center_from_frame(frames[peak])
    confidence = min(baseline_hip.confidence, peak_hip.confidence)
    if not baseline_hip.is_valid or not peak_hip.is_valid:
        return JumpHeightResult(0.0, 0.0, confidence, False)

    height = baseline_hip.position.y - peak_hip.position.y
    if height < MIN_JUMP_HEIGHT:
        return JumpHeightResult(0.0, 0.0, confidence, False)

    percentage = min(100.0, height / ESTIMATED_BODY_HEIGHT * 100.0)
    return JumpHeightResult(height, percentage, confidence, True)


def _upward_velocity(frames: Sequence[PoseFrame], i: int, fps: float) -> Optional[float]:
    a = hip_center_from_frame(frames[i])
    b = hip_center_from_frame(frames[i + 1])
    if not a.is_valid or not b.is_valid:
        return None
    return calculate_vertical_velocity_physics(a.position, b.position, fps)


def analyze_jump(frames: Sequence[PoseFrame], fps: float, keyframes: Optional[Keyframes] = None) -> JumpAnalysis:
    """Jump height plus takeoff, landing and flight time from hip-center motion.

    Provided keyframes take precedence over the built-in baseline and peak
    searches.
    """
    if len(frames) < 10 or fps <= 0:
        return JumpAnalysis()

    keyframes = keyframes or Keyframes()
    baseline = keyframes.start if keyframes.start is not None else find_baseline_frame(frames)
    peak = keyframes.peak_jump if keyframes.peak_jump is not None else find_peak_jump_frame(frames)
    end = keyframes.end if keyframes.end is not None else len(frames) - 1
    if baseline is None or peak is None:
        return JumpAnalysis()

    height = estimate_jump_height(frames, peak, baseline)
    if not height.is_valid:
        return JumpAnalysis()

    takeoff = None
    for i in range(baseline, peak):
        if i + 1 >= len(frames):
            break
        v = _upward_velocity(frames, i, fps)
        if v is not None and v > TAKEOFF_VELOCITY:
            takeoff = i
            break

    landing = None
    for i in range(peak + 1, min(end, len(frames) - 1)):
        v = _upward_velocity(frames, i, fps)
        if v is not None and abs(v) < LANDING_VELOCITY and i > peak + LANDING_MIN_OFFSET:
            landing = i
            break

    flight_time = None
    if takeoff is not None and landing is not None:
        flight_time = (landing - takeoff) / fps

    peak_velocity = 0.0
    for i in range(baseline, peak):
        if i + 1 >= len(frames):
            break
        v = _upward_velocity(frames, i, fps)
        if v is not None and v > peak_velocity:
            peak_velocity = v

    return JumpAnalysis(
        height_normalized=height.height_normalized,
        height_percentage=height.height_percentage,
        takeoff_frame=takeoff,
        peak_frame=peak,
        landing_frame=landing,
        flight_time=flight_time,
        peak_velocity=peak_velocity,
        confidence=height.confidence,
        is_valid=True,
    )


def jump_height_to_cm(normalized_height: float, scale_factor: float) -> float:
    return normalized_height * scale_factor


def estimate_scale_factor_from_height(user_height_cm: float, body_height_in_frame: float = 0.7) -> float:
    if body_height_in_frame <= 0:
        return 0.0
    return user_height_cm / body_height_in_frame
