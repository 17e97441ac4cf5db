import logging
from typing import List, Optional, Tuple

import cv2
import mediapipe as mp

from pose_types import LANDMARK_COUNT, NormalizedPoint, PoseFrame

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_FPS = 30.0


class PoseDetector:
    def __init__(
        self,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        model_complexity: int = 1,
    ):
        self._mp_pose = mp.solutions.pose
        self._pose = self._mp_pose.Pose(
            static_image_mode=False,
            model_complexity=model_complexity,
            smooth_landmarks=True,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

    def process(self, frame_bgr, frame_number: int, timestamp: float) -> PoseFrame:
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self._pose.process(frame_rgb)

        if results.pose_landmarks is None:
            return PoseFrame(frame_number=frame_number, timestamp=timestamp)

        # Keep every landmark; consumers gate on visibility themselves.
        landmarks: List[Optional[NormalizedPoint]] = [None] * LANDMARK_COUNT
        for idx, lm in enumerate(results.pose_landmarks.landmark[:LANDMARK_COUNT]):
            landmarks[idx] = NormalizedPoint(lm.x, lm.y, lm.z, lm.visibility)

        visible = [lm.visibility for lm in landmarks if lm is not None]
        confidence = sum(visible) / len(visible) if visible else 0.0
        return PoseFrame(frame_number=frame_number, timestamp=timestamp, landmarks=landmarks, confidence=confidence)

    def close(self) -> None:
        self._pose.close()


def extract_pose_frames(
    video_path: str, detector: Optional[PoseDetector] = None
) -> Tuple[List[PoseFrame], float, float]:
    """Run pose detection over every frame of a video file.

    Returns the frames, the frame rate and the clip duration in seconds.
    Raises ValueError when the file cannot be opened.
    """
    capture = cv2.VideoCapture(video_path)
    if not capture.isOpened():
        raise ValueError(f"Could not open video: {video_path}")

    fps = capture.get(cv2.CAP_PROP_FPS)
    if not fps or fps <= 0:
        logger.warning("Video reports no frame rate, assuming %.0f fps", DEFAULT_VIDEO_FPS)
        fps = DEFAULT_VIDEO_FPS

    owns_detector = detector is None
    detector = detector or PoseDetector()
    frames: List[PoseFrame] = []
    try:
        while True:
            ok, frame_bgr = capture.read()
            if not ok:
                break
            frame_number = len(frames)
            frames.append(detector.process(frame_bgr, frame_number, frame_number / fps))
    finally:
        capture.release()
        if owns_detector:
            detector.close()

    duration = len(frames) / fps
    detected = sum(1 for f in frames if f.has_landmarks)
    logger.info("Extracted %d frames (%d with a pose) from %s at %.1f fps", len(frames), detected, video_path, fps)
    return frames, fps, duration
