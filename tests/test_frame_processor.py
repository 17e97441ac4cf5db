import pytest

from conftest import make_frame
from frame_processor import (
    ProcessingConfig,
    calculate_fps,
    calculate_fps_from_timestamps,
    extract_hip_center_y,
    extract_wrist_y,
    process_landmark_frames,
    validate_frames,
)
from pose_types import PoseFrame


def test_valid_sequence(standing_frames):
    assert validate_frames(standing_frames) == (True, [])


def test_empty_sequence_is_invalid():
    assert validate_frames([]) == (False, ["No frames provided"])


def test_short_sequence_reports_issue():
    ok, issues = validate_frames([make_frame(i) for i in range(5)])
    assert not ok
    assert issues == ["Insufficient frames: 5 < 10 required"]


def test_no_landmarks_is_invalid():
    frames = [PoseFrame(frame_number=i, timestamp=i / 30) for i in range(12)]
    ok, issues = validate_frames(frames)
    assert not ok
    assert "No frames contain landmarks" in issues


def test_low_detection_rate_and_confidence():
    frames = [make_frame(i, visibility=0.2) for i in range(4)]
    frames += [PoseFrame(frame_number=i, timestamp=i / 30) for i in range(4, 12)]
    ok, issues = validate_frames(frames)
    assert not ok
    assert any(issue.startswith("Low landmark detection rate") for issue in issues)
    assert any(issue.startswith("Low average confidence") for issue in issues)


def test_fps_from_duration(standing_frames):
    assert calculate_fps(standing_frames, 2.0) == pytest.approx(20.0)
    assert calculate_fps(standing_frames, 0.0) == 30.0
    assert calculate_fps([], 1.0) == 30.0


def test_fps_from_timestamps_ignores_dropouts():
    frames = [make_frame(i, fps=25) for i in range(10)]
    frames.append(PoseFrame(frame_number=10, timestamp=5.0))
    assert calculate_fps_from_timestamps(frames) == 25.0
    assert calculate_fps_from_timestamps(frames[:1]) == 30.0


def test_process_smooths_and_reports(jump_frames):
    data = process_landmark_frames(jump_frames, 2.0)
    assert data is not None
    assert data.fps == pytest.approx(30.0)
    assert data.frame_count == 60
    assert data.valid_frame_count == 60
    assert data.metadata.smoothing_applied
    assert len(data.smoothed_frames) == len(data.original_frames)


def test_process_without_smoothing_copies_frames(jump_frames):
    data = process_landmark_frames(jump_frames, 2.0, ProcessingConfig(enable_smoothing=False))
    assert not data.metadata.smoothing_applied
    assert data.smoothed_frames == data.original_frames


def test_process_rejects_invalid_input():
    assert process_landmark_frames([], 1.0) is None


def test_series_extractors(standing_frames):
    assert extract_hip_center_y(standing_frames)[0] == pytest.approx(0.55)
    assert extract_wrist_y(standing_frames, "left")[0] == pytest.approx(0.53)
    frames = [PoseFrame(frame_number=0, timestamp=0.0)]
    assert extract_hip_center_y(frames) == [0.0]
