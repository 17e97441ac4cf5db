import json

import pytest

from analysis import AnalysisConfig, analyze_session
from conftest import PEAK, make_frame
from frame_processor import ProcessingConfig


def test_jump_shot_session(shot_frames):
    result = analyze_session(shot_frames, "basketball", "jump_shot", 2.0)
    assert result.ok
    assert result.processed.fps == pytest.approx(30.0)
    kf = result.keyframe_result.keyframes
    assert kf.peak_jump == PEAK
    assert result.keyframe_issues == []
    assert result.scoring.metrics_total == 7
    assert result.scoring.metrics_included >= 3
    assert 0 < result.scoring.overall_score <= 100
    assert 0 < result.scoring.confidence <= 1
    assert result.flaws.rules_evaluated == 7


def test_session_for_each_sport(shot_frames):
    for sport, action in [("volleyball", "spike"), ("badminton", "smash"), ("badminton", "serve")]:
        result = analyze_session(shot_frames, sport, action, 2.0)
        assert result.ok
        assert result.scoring.metrics_included > 0
        assert result.flaws.rules_evaluated > 0


def test_grade_curve_is_configurable(shot_frames):
    flat = analyze_session(shot_frames, "basketball", "jump_shot", 2.0, AnalysisConfig(grade_curve=0.0))
    curved = analyze_session(shot_frames, "basketball", "jump_shot", 2.0)
    assert curved.scoring.overall_score >= flat.scoring.overall_score


def test_smoothing_can_be_disabled(shot_frames):
    config = AnalysisConfig(processing=ProcessingConfig(enable_smoothing=False))
    result = analyze_session(shot_frames, "basketball", "jump_shot", 2.0, config)
    assert not result.processed.metadata.smoothing_applied


def test_unsupported_action():
    result = analyze_session([make_frame(i) for i in range(20)], "basketball", "dunk", 1.0)
    assert not result.ok
    assert result.processed is None
    assert result.issues == ["Unsupported sport/action: basketball/dunk"]
    assert result.flaws.rules_evaluated == 0


def test_too_few_frames():
    result = analyze_session([make_frame(i) for i in range(5)], "volleyball", "spike", 0.2)
    assert result.processed is None
    assert result.issues == ["Insufficient frames: 5 < 10 required"]
    assert result.scoring.overall_score == 0.0
    assert result.flaws.summary == "Not enough usable pose data to detect flaws."


def test_result_serializes(shot_frames):
    data = analyze_session(shot_frames, "basketball", "jump_shot", 2.0).to_dict()
    decoded = json.loads(json.dumps(data))
    assert decoded["sport"] == "basketball"
    assert decoded["keyframes"]["peak_jump"] == PEAK
    assert decoded["processing"]["frame_count"] == 60
    assert decoded["score"]["letter_grade"]
    assert set(decoded["score"]["breakdown"]) <= set(decoded["metrics"])


def test_failed_result_serializes():
    data = analyze_session([], "basketball", "jump_shot", 0.0).to_dict()
    assert data["issues"] == ["No frames provided"]
    assert data["keyframes"] is None
    assert data["processing"] is None
    assert data["score"]["letter_grade"] == "F"
