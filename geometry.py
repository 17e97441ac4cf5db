import math
import numbers
from dataclasses import dataclass, replace
from typing import Tuple, TypeVar, Union

from pose_types import NormalizedPoint

EPSILON = 1e-10


@dataclass(frozen=True)
class Vector2D:
    x: float
    y: float


@dataclass(frozen=True)
class Vector3D:
    x: float
    y: float
    z: float


Vector = Union[Vector2D, Vector3D]
V = TypeVar("V", Vector2D, Vector3D)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def safe_acos(ratio: float) -> float:
    # Rounding can push a bounded ratio just outside [-1, 1].
    return math.acos(clamp(ratio, -1.0, 1.0))


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def is_finite_number(value) -> bool:
    return value is not None and isinstance(value, numbers.Real) and math.isfinite(value)


def _to_xy(p: Union[NormalizedPoint, Vector]) -> Tuple[float, float]:
    return p.x, p.y


def to_vector2d(p: NormalizedPoint) -> Vector2D:
    return Vector2D(p.x, p.y)


def to_vector3d(p: NormalizedPoint) -> Vector3D:
    return Vector3D(p.x, p.y, p.z or 0.0)


def vector_between(start: NormalizedPoint, end: NormalizedPoint) -> Vector2D:
    sx, sy = _to_xy(start)
    ex, ey = _to_xy(end)
    return Vector2D(ex - sx, ey - sy)


def add(a: V, b: V) -> V:
    if isinstance(a, Vector3D):
        return Vector3D(a.x + b.x, a.y + b.y, a.z + b.z)
    return Vector2D(a.x + b.x, a.y + b.y)


def subtract(a: V, b: V) -> V:
    if isinstance(a, Vector3D):
        return Vector3D(a.x - b.x, a.y - b.y, a.z - b.z)
    return Vector2D(a.x - b.x, a.y - b.y)


def scale(v: V, factor: float) -> V:
    if isinstance(v, Vector3D):
        return Vector3D(v.x * factor, v.y * factor, v.z * factor)
    return Vector2D(v.x * factor, v.y * factor)


def dot(a: V, b: V) -> float:
    if isinstance(a, Vector3D):
        return a.x * b.x + a.y * b.y + a.z * b.z
    return a.x * b.x + a.y * b.y


def cross(a: V, b: V) -> Union[float, Vector3D]:
    # 2D cross product is the z component of the 3D one.
    if isinstance(a, Vector3D):
        return Vector3D(
            a.y * b.z - a.z * b.y,
            a.z * b.x - a.x * b.z,
            a.x * b.y - a.y * b.x,
        )
    return a.x * b.y - a.y * b.x


def magnitude_squared(v: Vector) -> float:
    return dot(v, v)


def magnitude(v: Vector) -> float:
    return math.sqrt(magnitude_squared(v))


def is_zero(v: Vector) -> bool:
    return magnitude(v) < EPSILON


def normalize(v: V) -> V:
    mag = magnitude(v)
    if mag < EPSILON:
        return scale(v, 0.0)
    return scale(v, 1.0 / mag)


def vector_angle(v: Vector2D) -> float:
    return math.atan2(v.y, v.x)


def vector_angle_degrees(v: Vector2D) -> float:
    return math.degrees(vector_angle(v))


def rotate(v: Vector2D, radians: float) -> Vector2D:
    cos_a = math.cos(radians)
    sin_a = math.sin(radians)
    return Vector2D(v.x * cos_a - v.y * sin_a, v.x * sin_a + v.y * cos_a)


def project(a: V, b: V) -> V:
    # Projection of a onto b.
    b_sq = magnitude_squared(b)
    if b_sq < EPSILON:
        return scale(b, 0.0)
    return scale(b, dot(a, b) / b_sq)


def perpendicular(v: Vector2D) -> Vector2D:
    return Vector2D(-v.y, v.x)


def lerp(a: V, b: V, t: float) -> V:
    t = clamp(t, 0.0, 1.0)
    return add(a, scale(subtract(b, a), t))


def distance_2d(a: NormalizedPoint, b: NormalizedPoint) -> float:
    ax, ay = _to_xy(a)
    bx, by = _to_xy(b)
    return math.hypot(ax - bx, ay - by)


def invert_y(p: NormalizedPoint) -> NormalizedPoint:
    return replace(p, y=1.0 - p.y)


def to_physics_coordinates(p: NormalizedPoint) -> NormalizedPoint:
    # Image space has y growing downward; physics space has y growing upward.
    return invert_y(p)


def to_mediapipe_coordinates(p: NormalizedPoint) -> NormalizedPoint:
    return invert_y(p)


def midpoint(a: NormalizedPoint, b: NormalizedPoint) -> NormalizedPoint:
    z = None
    if a.z is not None or b.z is not None:
        z = ((a.z or 0.0) + (b.z or 0.0)) / 2.0
    return NormalizedPoint((a.x + b.x) / 2.0, (a.y + b.y) / 2.0, z)
