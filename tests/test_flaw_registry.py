from flaw_registry import (
    _DETECTORS,
    detect_flaws,
    get_flaw_detector,
    get_supported_sports_for_flaws,
    is_flaw_detection_supported,
)
from flaws import detect_volleyball_flaws


def test_supported_sports():
    assert get_supported_sports_for_flaws() == ["basketball", "volleyball", "badminton"]
    assert is_flaw_detection_supported("volleyball")
    assert not is_flaw_detection_supported("tennis")
    assert get_flaw_detector("volleyball") is detect_volleyball_flaws


def test_dispatch():
    result = detect_flaws("badminton", {"elbow_at_contact": 110}, "smash")
    assert [f.id for f in result.flaws] == ["badminton_smash_low_elbow_extension"]


def test_unsupported_sport(caplog):
    result = detect_flaws("tennis", {"elbow": 90}, "serve")
    assert result.flaws == []
    assert result.rules_evaluated == 0
    assert result.summary == "Flaw detection for tennis is not supported."
    assert "No flaw detector found for sport: tennis" in caplog.text


def test_detector_errors_are_contained(monkeypatch, caplog):
    def broken(metrics, action, keyframes=None):
        raise KeyError("boom")

    monkeypatch.setitem(_DETECTORS, "basketball", broken)
    result = detect_flaws("basketball", {}, "jump_shot")
    assert result.flaws == []
    assert result.overall_injury_risk == "none"
    assert result.summary == "An error occurred during flaw detection."
    assert "Error detecting flaws for basketball" in caplog.text
