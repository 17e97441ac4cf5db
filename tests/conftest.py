from typing import Dict, Optional, Tuple

import pytest

from pose_types import LANDMARK_COUNT, LandmarkIndex as L, NormalizedPoint, PoseFrame

FPS = 30.0
PEAK = 30

# A person standing square to the camera, image coordinates.
STANDING: Dict[int, Tuple[float, float]] = {
    L.NOSE: (0.50, 0.12),
    L.LEFT_SHOULDER: (0.56, 0.30),
    L.RIGHT_SHOULDER: (0.44, 0.30),
    L.LEFT_ELBOW: (0.58, 0.42),
    L.RIGHT_ELBOW: (0.42, 0.42),
    L.LEFT_WRIST: (0.58, 0.53),
    L.RIGHT_WRIST: (0.42, 0.53),
    L.LEFT_HIP: (0.54, 0.55),
    L.RIGHT_HIP: (0.46, 0.55),
    L.LEFT_KNEE: (0.54, 0.72),
    L.RIGHT_KNEE: (0.46, 0.72),
    L.LEFT_ANKLE: (0.54, 0.90),
    L.RIGHT_ANKLE: (0.46, 0.90),
    L.LEFT_HEEL: (0.53, 0.92),
    L.RIGHT_HEEL: (0.47, 0.92),
    L.LEFT_FOOT_INDEX: (0.56, 0.93),
    L.RIGHT_FOOT_INDEX: (0.44, 0.93),
}

_HAND = {
    L.LEFT_PINKY: L.LEFT_WRIST,
    L.LEFT_INDEX: L.LEFT_WRIST,
    L.LEFT_THUMB: L.LEFT_WRIST,
    L.RIGHT_PINKY: L.RIGHT_WRIST,
    L.RIGHT_INDEX: L.RIGHT_WRIST,
    L.RIGHT_THUMB: L.RIGHT_WRIST,
}


def point(x: float, y: float, visibility: Optional[float] = 0.95) -> NormalizedPoint:
    return NormalizedPoint(x, y, 0.0, visibility)


def make_frame(
    frame_number: int = 0,
    lift: float = 0.0,
    overrides: Optional[Dict[int, Tuple[float, float]]] = None,
    visibility: Optional[float] = 0.95,
    fps: float = FPS,
) -> PoseFrame:
    positions = dict(STANDING)
    if overrides:
        positions.update(overrides)
    landmarks = []
    for i in range(LANDMARK_COUNT):
        if i in positions:
            x, y = positions[i]
        elif i in _HAND:
            x, y = positions[_HAND[i]]
        else:
            x, y = positions[L.NOSE]
        landmarks.append(NormalizedPoint(x, y - lift, 0.0, visibility))
    return PoseFrame(frame_number=frame_number, timestamp=frame_number / fps, landmarks=landmarks, confidence=visibility)


def jump_lift(i: int, peak: int = PEAK, half_width: int = 10, height: float = 0.1) -> float:
    offset = (i - peak) / half_width
    return max(0.0, height * (1 - offset * offset))


def shooting_arm(i: int, peak: int = PEAK) -> Dict[int, Tuple[float, float]]:
    """Right arm rising from the chest to a straight overhead release at the peak, then lowering."""
    t = max(0.0, 1.0 - abs(i - peak) / 12.0)
    elbow = (0.42, 0.42 - 0.24 * t)
    wrist = (0.42 + 0.02 * (1 - t), 0.53 - 0.47 * t)
    return {L.RIGHT_ELBOW: elbow, L.RIGHT_WRIST: wrist}


@pytest.fixture
def standing_frames():
    return [make_frame(i) for i in range(40)]


@pytest.fixture
def jump_frames():
    return [make_frame(i, lift=jump_lift(i)) for i in range(60)]


@pytest.fixture
def shot_frames():
    return [make_frame(i, lift=jump_lift(i), overrides=shooting_arm(i)) for i in range(60)]
