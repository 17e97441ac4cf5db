from dataclasses import fields

from pose_types import Keyframes
from sport_registry import (
    SportEntry,
    _REGISTRY,
    calculate_sport_metrics,
    get_metric_calculator,
    get_supported_sports,
    is_sport_supported,
)
from sports import MetricCalculationInput, calculate_volleyball_metrics


def _input(frames, action):
    return MetricCalculationInput(
        smoothed_frames=frames, keyframes=Keyframes(start=5, peak_jump=30, release=30, end=55), fps=30.0, action=action
    )


def test_supported_sports():
    assert get_supported_sports() == ["basketball", "volleyball", "badminton"]
    assert is_sport_supported("badminton")
    assert not is_sport_supported("curling")


def test_calculator_lookup(caplog):
    assert get_metric_calculator("volleyball") is calculate_volleyball_metrics
    assert get_metric_calculator("curling") is None
    assert "No calculator found for sport: curling" in caplog.text


def test_dispatches_to_sport(shot_frames):
    metrics = calculate_sport_metrics("volleyball", _input(shot_frames, "spike"))
    assert metrics["contact_height"] == 130


def test_unsupported_sport_returns_empty(shot_frames):
    assert calculate_sport_metrics("curling", _input(shot_frames, "slide")) == {}


def test_calculator_errors_are_contained(shot_frames, monkeypatch, caplog):
    def broken(data):
        raise RuntimeError("boom")

    monkeypatch.setitem(_REGISTRY, "basketball", SportEntry("basketball", broken))
    assert calculate_sport_metrics("basketball", _input(shot_frames, "jump_shot")) == {}
    assert "Error calculating basketball metrics" in caplog.text


def test_entries_carry_only_name_and_calculator():
    assert [f.name for f in fields(SportEntry)] == ["name", "calculator"]
    entry = _REGISTRY["volleyball"]
    assert entry.calculator is calculate_volleyball_metrics
