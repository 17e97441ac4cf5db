import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

import numpy as np

from pose_types import NormalizedPoint, PoseFrame

logger = logging.getLogger(__name__)


@dataclass
class SmoothingConfig:
    window_size: int = 5
    preserve_edges: bool = True
    min_visibility: float = 0.3
    smooth_visibility: bool = False


def _odd_half_window(window_size: int) -> int:
    effective = window_size + 1 if window_size % 2 == 0 else window_size
    return effective // 2


def moving_average(values: Sequence[float], window_size: int = 5, preserve_edges: bool = True) -> List[float]:
    """Centered moving average over a clipped window, skipping NaN samples.

    An even window is widened to the next odd size. With preserve_edges the
    first and last half-window samples are copied through unchanged.
    """
    if len(values) == 0:
        return []
    if len(values) == 1 or window_size <= 1:
        return list(values)

    arr = np.asarray(values, dtype=float)
    n = len(arr)
    half = _odd_half_window(window_size)
    smoothed: List[float] = []
    for i in range(n):
        if preserve_edges and (i < half or i >= n - half):
            smoothed.append(float(arr[i]))
            continue
        window = arr[max(0, i - half):min(n - 1, i + half) + 1]
        finite = window[~np.isnan(window)]
        smoothed.append(float(finite.mean()) if finite.size else float(arr[i]))
    return smoothed


def weighted_moving_average(values: Sequence[float], window_size: int = 5) -> List[float]:
    # Triangular weights peaking at the center sample.
    if len(values) == 0:
        return []
    if len(values) == 1 or window_size <= 1:
        return list(values)

    arr = np.asarray(values, dtype=float)
    n = len(arr)
    half = _odd_half_window(window_size)
    weights = np.array([half + 1 - abs(k) for k in range(-half, half + 1)], dtype=float)
    smoothed: List[float] = []
    for i in range(n):
        total = 0.0
        total_weight = 0.0
        for k in range(-half, half + 1):
            idx = i + k
            if 0 <= idx < n and not np.isnan(arr[idx]):
                total += arr[idx] * weights[k + half]
                total_weight += weights[k + half]
        smoothed.append(total / total_weight if total_weight > 0 else float(arr[i]))
    return smoothed


def _coordinate_series(frames: Sequence[PoseFrame], index: int, coordinate: str) -> List[float]:
    series = []
    for frame in frames:
        lm = frame.landmark(index)
        if lm is None:
            series.append(0.0)
            continue
        value = getattr(lm, coordinate)
        series.append(0.0 if value is None else value)
    return series


def _visibility_series(frames: Sequence[PoseFrame], index: int) -> List[float]:
    series = []
    for frame in frames:
        lm = frame.landmark(index)
        if lm is None:
            series.append(0.0)
        else:
            series.append(1.0 if lm.visibility is None else lm.visibility)
    return series


def _copy_frames(frames: Sequence[PoseFrame]) -> List[PoseFrame]:
    return [replace(f, landmarks=list(f.landmarks)) for f in frames]


def smooth_landmark_frames(frames: Sequence[PoseFrame], config: Optional[SmoothingConfig] = None) -> List[PoseFrame]:
    """Smooth every landmark coordinate independently across frames.

    Missing landmarks enter the series as 0 with visibility 0, so every
    smoothed frame carries all landmark slots.
    """
    config = config or SmoothingConfig()
    if len(frames) < config.window_size:
        logger.warning("Not enough frames for smoothing (%d < %d), returning original", len(frames), config.window_size)
        return _copy_frames(frames)

    num_landmarks = len(frames[0].landmarks) if frames else 0
    if num_landmarks == 0:
        logger.warning("No landmarks in frames")
        return list(frames)

    per_landmark: List[List[NormalizedPoint]] = []
    for idx in range(num_landmarks):
        xs = moving_average(_coordinate_series(frames, idx, "x"), config.window_size, config.preserve_edges)
        ys = moving_average(_coordinate_series(frames, idx, "y"), config.window_size, config.preserve_edges)
        zs = moving_average(_coordinate_series(frames, idx, "z"), config.window_size, config.preserve_edges)
        vis = _visibility_series(frames, idx)
        if config.smooth_visibility:
            vis = moving_average(vis, config.window_size, config.preserve_edges)
        per_landmark.append([NormalizedPoint(x, y, z, v) for x, y, z, v in zip(xs, ys, zs, vis)])

    smoothed = [
        PoseFrame(
            frame_number=frame.frame_number,
            timestamp=frame.timestamp,
            landmarks=[series[i] for series in per_landmark],
            confidence=frame.confidence,
        )
        for i, frame in enumerate(frames)
    ]
    logger.debug("Smoothed %d frames with window size %d", len(frames), config.window_size)
    return smoothed


def _central_difference(values: Sequence[float], fps: float) -> List[float]:
    dt = 1.0 / fps
    n = len(values)
    out = []
    for i in range(n):
        if i == 0:
            out.append((values[1] - values[0]) / dt)
        elif i == n - 1:
            out.append((values[i] - values[i - 1]) / dt)
        else:
            out.append((values[i + 1] - values[i - 1]) / (2 * dt))
    return out


def calculate_smoothed_velocity(positions: Sequence[float], fps: float, smoothing_window: int = 3) -> List[float]:
    if len(positions) < 2:
        return []
    return moving_average(_central_difference(positions, fps), smoothing_window, False)


def calculate_acceleration_series(velocities: Sequence[float], fps: float) -> List[float]:
    if len(velocities) < 2:
        return []
    return _central_difference(velocities, fps)
