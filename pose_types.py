from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

LANDMARK_COUNT = 33


@dataclass(frozen=True)
class NormalizedPoint:
    # Image-normalized coordinates in [0, 1]; y grows downward.
    x: float
    y: float
    z: Optional[float] = None
    visibility: Optional[float] = None


class LandmarkIndex(IntEnum):
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


@dataclass
class PoseFrame:
    frame_number: int
    timestamp: float
    landmarks: List[Optional[NormalizedPoint]] = field(default_factory=lambda: [None] * LANDMARK_COUNT)
    confidence: float = 0.0

    def landmark(self, index: int) -> Optional[NormalizedPoint]:
        if index < 0 or index >= len(self.landmarks):
            return None
        return self.landmarks[index]

    @property
    def has_landmarks(self) -> bool:
        return any(lm is not None for lm in self.landmarks)


@dataclass
class Keyframes:
    start: Optional[int] = None
    peak_jump: Optional[int] = None
    release: Optional[int] = None
    end: Optional[int] = None
