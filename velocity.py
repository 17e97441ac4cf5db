import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from distances import calculate_distance
from geometry import EPSILON, Vector2D
from pose_types import NormalizedPoint

DEFAULT_FPS = 30.0
MIN_VISIBILITY = 0.3


@dataclass(frozen=True)
class VelocityResult:
    speed: float
    velocity: Vector2D = field(default_factory=lambda: Vector2D(0.0, 0.0))
    is_valid: bool = False
    confidence: float = 0.0

    @property
    def vx(self) -> float:
        return self.velocity.x

    @property
    def vy(self) -> float:
        return self.velocity.y


@dataclass(frozen=True)
class SpeedResult:
    speed: float
    is_valid: bool
    confidence: float


def _vis(p: NormalizedPoint) -> float:
    return 1.0 if p.visibility is None else p.visibility


def _safe_fps(fps: float) -> float:
    return fps if fps > 0 else DEFAULT_FPS


def calculate_velocity(
    p1: Optional[NormalizedPoint],
    p2: Optional[NormalizedPoint],
    fps: float = DEFAULT_FPS,
) -> VelocityResult:
    """Frame-to-frame velocity in normalized units per second."""
    if p1 is None or p2 is None:
        return VelocityResult(0.0)

    confidence = min(_vis(p1), _vis(p2))
    if _vis(p1) < MIN_VISIBILITY or _vis(p2) < MIN_VISIBILITY:
        return VelocityResult(0.0, confidence=confidence)

    rate = _safe_fps(fps)
    vx = (p2.x - p1.x) * rate
    vy = (p2.y - p1.y) * rate
    return VelocityResult(math.hypot(vx, vy), Vector2D(vx, vy), True, confidence)


def calculate_speed(
    p1: Optional[NormalizedPoint],
    p2: Optional[NormalizedPoint],
    fps: float = DEFAULT_FPS,
) -> SpeedResult:
    dist = calculate_distance(p1, p2)
    if not dist.is_valid:
        return SpeedResult(0.0, False, dist.confidence)
    return SpeedResult(dist.normalized * _safe_fps(fps), True, dist.confidence)


def calculate_vertical_velocity(
    p1: Optional[NormalizedPoint],
    p2: Optional[NormalizedPoint],
    fps: float = DEFAULT_FPS,
) -> float:
    # Image space: positive means moving down.
    if p1 is None or p2 is None:
        return 0.0
    return (p2.y - p1.y) * _safe_fps(fps)


def calculate_vertical_velocity_physics(
    p1: Optional[NormalizedPoint],
    p2: Optional[NormalizedPoint],
    fps: float = DEFAULT_FPS,
) -> float:
    # Positive means moving up.
    return -calculate_vertical_velocity(p1, p2, fps)


def calculate_horizontal_velocity(
    p1: Optional[NormalizedPoint],
    p2: Optional[NormalizedPoint],
    fps: float = DEFAULT_FPS,
) -> float:
    if p1 is None or p2 is None:
        return 0.0
    return (p2.x - p1.x) * _safe_fps(fps)


def calculate_acceleration(
    p1: Optional[NormalizedPoint],
    p2: Optional[NormalizedPoint],
    p3: Optional[NormalizedPoint],
    fps: float = DEFAULT_FPS,
) -> Vector2D:
    if p1 is None or p2 is None or p3 is None:
        return Vector2D(0.0, 0.0)
    rate = _safe_fps(fps)
    v1 = calculate_velocity(p1, p2, rate)
    v2 = calculate_velocity(p2, p3, rate)
    if not v1.is_valid or not v2.is_valid:
        return Vector2D(0.0, 0.0)
    return Vector2D((v2.vx - v1.vx) * rate, (v2.vy - v1.vy) * rate)


def calculate_average_velocity(points: Sequence[NormalizedPoint], fps: float = DEFAULT_FPS) -> VelocityResult:
    """Net displacement over elapsed time; steadier than per-frame velocity."""
    if not points or len(points) < 2:
        return VelocityResult(0.0)

    elapsed = (len(points) - 1) / _safe_fps(fps)
    if elapsed < EPSILON:
        return VelocityResult(0.0)

    first, last = points[0], points[-1]
    vx = (last.x - first.x) / elapsed
    vy = (last.y - first.y) / elapsed
    avg_confidence = sum(_vis(p) for p in points) / len(points)
    return VelocityResult(
        math.hypot(vx, vy),
        Vector2D(vx, vy),
        avg_confidence >= MIN_VISIBILITY,
        avg_confidence,
    )


def calculate_peak_velocity(points: Sequence[NormalizedPoint], fps: float = DEFAULT_FPS) -> Tuple[float, int]:
    """Returns (peak_speed, frame_index) where the frame index is the later frame of the pair."""
    if not points or len(points) < 2:
        return 0.0, 0

    peak_speed = 0.0
    peak_index = 0
    for i in range(1, len(points)):
        result = calculate_speed(points[i - 1], points[i], fps)
        if result.is_valid and result.speed > peak_speed:
            peak_speed = result.speed
            peak_index = i
    return peak_speed, peak_index


def velocity_to_real(normalized_velocity: float, scale_factor: float) -> float:
    return normalized_velocity * scale_factor


def cm_per_sec_to_m_per_sec(cm_per_sec: float) -> float:
    return cm_per_sec / 100.0
