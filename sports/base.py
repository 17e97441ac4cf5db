import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from angles import calculate_elbow_angle
from geometry import round_half_up
from jump import analyze_jump
from pose_types import Keyframes, LandmarkIndex, NormalizedPoint, PoseFrame

logger = logging.getLogger(__name__)

MetricResult = Dict[str, Optional[float]]


@dataclass
class MetricCalculationInput:
    smoothed_frames: List[PoseFrame]
    keyframes: Keyframes
    fps: float
    action: str
    user_height_cm: Optional[float] = None


@dataclass(frozen=True)
class ArmLandmarks:
    shoulder: int
    elbow: int
    wrist: int
    hip: int
    knee: int
    ankle: int


LEFT_ARM = ArmLandmarks(
    LandmarkIndex.LEFT_SHOULDER,
    LandmarkIndex.LEFT_ELBOW,
    LandmarkIndex.LEFT_WRIST,
    LandmarkIndex.LEFT_HIP,
    LandmarkIndex.LEFT_KNEE,
    LandmarkIndex.LEFT_ANKLE,
)
RIGHT_ARM = ArmLandmarks(
    LandmarkIndex.RIGHT_SHOULDER,
    LandmarkIndex.RIGHT_ELBOW,
    LandmarkIndex.RIGHT_WRIST,
    LandmarkIndex.RIGHT_HIP,
    LandmarkIndex.RIGHT_KNEE,
    LandmarkIndex.RIGHT_ANKLE,
)


def side_landmarks(side: str) -> ArmLandmarks:
    return LEFT_ARM if side == "left" else RIGHT_ARM


def frame_at(frames: Sequence[PoseFrame], index: Optional[int]) -> Optional[PoseFrame]:
    if index is None or index < 0 or index >= len(frames):
        return None
    return frames[index]


def get_landmark(frame: Optional[PoseFrame], index: int, min_visibility: float) -> Optional[NormalizedPoint]:
    """Landmark if present, visible enough and with finite coordinates.

    Missing visibility counts as fully visible.
    """
    if frame is None:
        return None
    lm = frame.landmark(index)
    if lm is None:
        return None
    visibility = 1.0 if lm.visibility is None else lm.visibility
    if visibility < min_visibility:
        return None
    if math.isnan(lm.x) or math.isnan(lm.y):
        return None
    return lm


def higher_wrist_side(frame: Optional[PoseFrame], min_visibility: float) -> str:
    # Image y grows downward; the raised hand has the smaller y.
    left = get_landmark(frame, LandmarkIndex.LEFT_WRIST, min_visibility)
    right = get_landmark(frame, LandmarkIndex.RIGHT_WRIST, min_visibility)
    if left is None:
        return "right"
    if right is None:
        return "left"
    return "left" if left.y < right.y else "right"


def mean_y(a: Optional[NormalizedPoint], b: Optional[NormalizedPoint]) -> Optional[float]:
    if a is not None and b is not None:
        return (a.y + b.y) / 2.0
    if a is not None:
        return a.y
    if b is not None:
        return b.y
    return None


def joint_elbow_angle(frame: Optional[PoseFrame], arm: ArmLandmarks, min_visibility: float) -> Optional[float]:
    shoulder = get_landmark(frame, arm.shoulder, min_visibility)
    elbow = get_landmark(frame, arm.elbow, min_visibility)
    wrist = get_landmark(frame, arm.wrist, min_visibility)
    if shoulder is None or elbow is None or wrist is None:
        return None
    result = calculate_elbow_angle(shoulder, elbow, wrist)
    if not result.is_valid or math.isnan(result.degrees):
        return None
    return round_half_up(result.degrees, 1)


def contact_height(
    frame: Optional[PoseFrame],
    arm: ArmLandmarks,
    min_visibility: float,
    min_body_height: float = 0.05,
) -> Optional[float]:
    """Wrist height above the ankles as a percentage of ankle-to-shoulder height, capped at 130."""
    wrist = get_landmark(frame, arm.wrist, min_visibility)
    ankle_y = mean_y(
        get_landmark(frame, LandmarkIndex.LEFT_ANKLE, min_visibility),
        get_landmark(frame, LandmarkIndex.RIGHT_ANKLE, min_visibility),
    )
    shoulder_y = mean_y(
        get_landmark(frame, LandmarkIndex.LEFT_SHOULDER, min_visibility),
        get_landmark(frame, LandmarkIndex.RIGHT_SHOULDER, min_visibility),
    )
    if wrist is None or ankle_y is None or shoulder_y is None:
        return None
    body_height = ankle_y - shoulder_y
    if body_height < min_body_height:
        return None
    ratio = (ankle_y - wrist.y) / body_height * 100.0
    return round_half_up(max(0.0, min(130.0, ratio)))


def hip_center_x(frame: Optional[PoseFrame], min_visibility: float) -> Optional[float]:
    left = get_landmark(frame, LandmarkIndex.LEFT_HIP, min_visibility)
    right = get_landmark(frame, LandmarkIndex.RIGHT_HIP, min_visibility)
    if left is None or right is None:
        return None
    return (left.x + right.x) / 2.0


def shoulder_width(frame: Optional[PoseFrame], min_visibility: float) -> Optional[float]:
    left = get_landmark(frame, LandmarkIndex.LEFT_SHOULDER, min_visibility)
    right = get_landmark(frame, LandmarkIndex.RIGHT_SHOULDER, min_visibility)
    if left is None or right is None:
        return None
    return abs(right.x - left.x)


def stability_score(
    frames: Sequence[PoseFrame],
    start: Optional[int],
    end: Optional[int],
    min_visibility: float,
) -> Optional[float]:
    """How little the hip center drifts sideways between two frames, 0-100.

    Drift is measured in shoulder widths; 0.8 widths or more scores 0.
    """
    start_frame = frame_at(frames, start)
    end_frame = frame_at(frames, end)
    start_x = hip_center_x(start_frame, min_visibility)
    end_x = hip_center_x(end_frame, min_visibility)
    if start_x is None or end_x is None:
        return None
    width = shoulder_width(start_frame, min_visibility)
    body_width = max(width, 0.05) if width is not None else 0.2
    drift = abs(end_x - start_x) / body_width
    return round_half_up(max(0.0, min(1.0, 1 - drift / 0.8)) * 100.0)


def follow_through_score(
    frames: Sequence[PoseFrame],
    arm: ArmLandmarks,
    contact: int,
    min_visibility: float,
    look_ahead: int,
    full_extension: float,
) -> Optional[float]:
    """Peak elbow extension after contact mapped from 120 degrees (0) to full_extension (100)."""
    end = min(contact + look_ahead, len(frames) - 1)
    if end <= contact:
        return None
    max_angle = 0.0
    for i in range(contact, end + 1):
        angle = joint_elbow_angle(frame_at(frames, i), arm, min_visibility)
        if angle is not None and angle > max_angle:
            max_angle = angle
    if max_angle == 0:
        return None
    raw = (max_angle - 120.0) / (full_extension - 120.0) * 100.0
    return round_half_up(max(0.0, min(100.0, raw)))


def jump_height(frames: Sequence[PoseFrame], fps: float, keyframes: Keyframes) -> Optional[float]:
    if keyframes.peak_jump is None or keyframes.start is None:
        return None
    if not frames or fps <= 0:
        return None
    analysis = analyze_jump(frames, fps, keyframes)
    if not analysis.is_valid or math.isnan(analysis.height_normalized):
        return None
    return round_half_up(analysis.height_normalized, 3)


def trunk_rotation(frame: Optional[PoseFrame], min_visibility: float) -> Optional[float]:
    """Angle between the shoulder line and the hip line in the image plane."""
    ls = get_landmark(frame, LandmarkIndex.LEFT_SHOULDER, min_visibility)
    rs = get_landmark(frame, LandmarkIndex.RIGHT_SHOULDER, min_visibility)
    lh = get_landmark(frame, LandmarkIndex.LEFT_HIP, min_visibility)
    rh = get_landmark(frame, LandmarkIndex.RIGHT_HIP, min_visibility)
    if ls is None or rs is None or lh is None or rh is None:
        return None
    shoulder_angle = math.degrees(math.atan2(ls.y - rs.y, ls.x - rs.x))
    hip_angle = math.degrees(math.atan2(lh.y - rh.y, lh.x - rh.x))
    diff = abs(shoulder_angle - hip_angle)
    if diff > 180:
        diff = 360 - diff
    return round_half_up(diff, 1)


def body_posture_score(frame: Optional[PoseFrame], min_visibility: float) -> Optional[float]:
    # 100 when upright, losing 100/45 points per degree of trunk lean.
    ls = get_landmark(frame, LandmarkIndex.LEFT_SHOULDER, min_visibility)
    rs = get_landmark(frame, LandmarkIndex.RIGHT_SHOULDER, min_visibility)
    lh = get_landmark(frame, LandmarkIndex.LEFT_HIP, min_visibility)
    rh = get_landmark(frame, LandmarkIndex.RIGHT_HIP, min_visibility)
    if ls is None or rs is None or lh is None or rh is None:
        return None
    dy = (lh.y + rh.y) / 2.0 - (ls.y + rs.y) / 2.0
    if abs(dy) < 0.01:
        return None
    dx = (ls.x + rs.x) / 2.0 - (lh.x + rh.x) / 2.0
    lean = abs(math.degrees(math.atan2(dx, dy)))
    return round_half_up(max(0.0, 100.0 - lean * (100.0 / 45.0)))


def arm_swing_score(
    frames: Sequence[PoseFrame],
    arm: ArmLandmarks,
    contact: int,
    fps: float,
    min_visibility: float,
    lookback: int = 12,
) -> Optional[float]:
    """Wrist path speed leading into contact, relative to 10 shoulder widths per second."""
    start = max(0, contact - lookback)
    if start >= contact:
        return None
    total = 0.0
    valid = 0
    for i in range(start, contact):
        a = get_landmark(frame_at(frames, i), arm.wrist, min_visibility)
        b = get_landmark(frame_at(frames, i + 1), arm.wrist, min_visibility)
        if a is None or b is None:
            continue
        total += math.hypot(b.x - a.x, b.y - a.y)
        valid += 1
    if valid < 3:
        return None
    width = shoulder_width(frame_at(frames, contact), min_visibility)
    reference = max(width if width is not None else 0.2, 0.05) * 10.0
    speed = total / (valid / fps)
    return round_half_up(min(100.0, speed / reference * 100.0))


def hand_symmetry(frame: Optional[PoseFrame], min_visibility: float) -> Optional[float]:
    lw = get_landmark(frame, LandmarkIndex.LEFT_WRIST, min_visibility)
    rw = get_landmark(frame, LandmarkIndex.RIGHT_WRIST, min_visibility)
    if lw is None or rw is None:
        return None
    width = shoulder_width(frame, min_visibility)
    sw = width if width is not None else 0.2
    height_diff = abs(lw.y - rw.y)
    return round_half_up(max(0.0, 100.0 - height_diff / max(sw, 0.05) * 200.0))


def find_contact_frame(
    frames: Sequence[PoseFrame],
    side: str,
    min_visibility: float,
    start: int = 0,
    end: Optional[int] = None,
) -> int:
    """Frame where the hitting wrist is highest; the search midpoint when it is never seen."""
    end = len(frames) - 1 if end is None else end
    wrist_index = side_landmarks(side).wrist
    best = (start + end) // 2
    min_y = float("inf")
    for i in range(start, end + 1):
        lm = get_landmark(frame_at(frames, i), wrist_index, min_visibility)
        if lm is not None and lm.y < min_y:
            min_y = lm.y
            best = i
    return best


def empty_metrics(*keys: str) -> MetricResult:
    return {key: None for key in keys}


@dataclass
class OverheadContact:
    side: str
    contact: int
    frame: PoseFrame
    arm: ArmLandmarks = field(init=False)

    def __post_init__(self):
        self.arm = side_landmarks(self.side)


def locate_overhead_contact(
    frames: Sequence[PoseFrame], keyframes: Keyframes, min_visibility: float
) -> Optional[OverheadContact]:
    """Hitting arm and contact frame for an overhead strike.

    The release keyframe is used as contact when available; otherwise the
    hitting wrist's highest point between start and end.
    """
    search_start = keyframes.start if keyframes.start is not None else 0
    search_end = keyframes.end if keyframes.end is not None else len(frames) - 1
    probe = keyframes.release if keyframes.release is not None else (search_start + search_end) // 2
    side = higher_wrist_side(frame_at(frames, probe), min_visibility)
    if keyframes.release is not None:
        contact = keyframes.release
    else:
        contact = find_contact_frame(frames, side, min_visibility, search_start, search_end)
    frame = frame_at(frames, contact)
    if frame is None:
        return None
    return OverheadContact(side, contact, frame)
