import math

import pytest

from flaws import detect_badminton_flaws, detect_basketball_flaws, detect_volleyball_flaws, has_injury_risk
from flaws.base import (
    DetectedFlaw,
    FlawRule,
    aggregate_injury_risk,
    evaluate_if_present,
    ratio_confidence,
    sort_flaws,
)
from pose_types import Keyframes


def _flaw(severity="medium", injury=False, flaw_id="x"):
    return DetectedFlaw(flaw_id, "t", "d", severity, "form", injury, [], "c", 0.5)


def test_smash_elbow_far_below_threshold():
    result = detect_badminton_flaws({"elbow_at_contact": 110}, "smash")
    assert len(result.flaws) == 1
    flaw = result.flaws[0]
    assert flaw.id == "badminton_smash_low_elbow_extension"
    assert flaw.severity == "high"
    assert not flaw.injury_risk
    assert flaw.confidence == 1.0
    assert flaw.actual_value == 110
    assert flaw.threshold == 140
    assert "110.0°" in flaw.description
    assert result.rules_evaluated == 6
    assert result.summary == "1 flaw detected in your badminton smash."


def test_smash_elbow_just_below_threshold():
    flaw = detect_badminton_flaws({"elbow_at_contact": 130}, "smash").flaws[0]
    assert flaw.severity == "medium"
    assert flaw.confidence == pytest.approx(0.4)


@pytest.mark.parametrize("value", [None, float("nan"), float("inf")])
def test_unusable_metrics_are_skipped(value):
    result = detect_badminton_flaws({"elbow_at_contact": value, "contact_height": value}, "smash")
    assert result.flaws == []
    assert result.overall_injury_risk == "none"
    assert result.summary == "Great smash! No significant form flaws detected."


def test_drop_shot_summary_uses_display_name():
    result = detect_badminton_flaws({"contact_height": 40, "elbow_angle": 90}, "drop_shot")
    assert result.rules_evaluated == 5
    assert result.summary == "2 flaws detected in your badminton drop shot."


def test_unknown_badminton_action():
    result = detect_badminton_flaws({"elbow_at_contact": 110}, "lob")
    assert result.flaws == []
    assert result.rules_evaluated == 0
    assert result.summary == 'Flaw detection for badminton action "lob" is not supported.'


def test_elbow_hyperextension_is_an_injury_risk():
    result = detect_basketball_flaws({"elbow_angle_at_release": 178}, "jump_shot")
    flaw = result.flaws[0]
    assert flaw.id == "basketball_jumpshot_elbow_hyperextension"
    assert flaw.injury_risk
    assert flaw.category == "injury_risk"
    assert flaw.confidence == pytest.approx(0.6)
    assert flaw.injury_details
    assert flaw.drill.name == "Elbow Position Drill"
    assert result.overall_injury_risk == "low"
    assert result.rules_evaluated == 7


def test_shot_flaws_put_injuries_first():
    metrics = {"elbow_angle_at_release": 178, "knee_angle_at_peak": 100, "release_angle": 50}
    result = detect_basketball_flaws(metrics, "free_throw")
    assert [f.id for f in result.flaws] == [
        "basketball_jumpshot_elbow_hyperextension",
        "basketball_jumpshot_knee_underextension_severe",
    ]
    assert result.summary == (
        "Detected 2 issue(s), including 1 potential injury risk(s). Address these for safety."
    )


def test_severe_instability_raises_overall_risk():
    result = detect_basketball_flaws({"stability_index": 40}, "jump_shot")
    assert result.flaws[0].severity == "high"
    assert result.overall_injury_risk == "high"


def test_clean_shot_summary():
    metrics = {"release_angle": 50, "elbow_angle_at_release": 165, "stability_index": 90}
    result = detect_basketball_flaws(metrics, "jump_shot")
    assert result.flaws == []
    assert result.summary == "Great job! No significant technique issues detected."


def test_dribbling_flaws_sorted_by_severity():
    metrics = {"knee_bend_score": 10, "stance_width": 250, "balance_score": 50}
    result = detect_basketball_flaws(metrics, "dribbling")
    assert [f.id for f in result.flaws] == ["straight_knee_dribble", "poor_balance_dribble", "wide_stance_dribble"]
    assert result.rules_evaluated == 4
    assert result.summary == (
        "Detected 3 issue(s) with your dribbling posture, including 1 high-priority item(s)."
    )


def test_layup_and_unknown_basketball_actions():
    layup = detect_basketball_flaws({"stability_index": 10}, "layup")
    assert layup.flaws == []
    assert layup.summary == "Layup technique evaluation focuses on scoring metrics above."
    dunk = detect_basketball_flaws({}, "dunk")
    assert dunk.summary == "Flaw detection for dunk is not yet available."


def test_keyframes_are_stamped_on_flaws():
    keyframes = Keyframes(start=3, peak_jump=20, release=22, end=40)
    metrics = {"elbow_angle_at_release": 120, "jump_height_normalized": 0.01}
    flaws = {f.id: f for f in detect_basketball_flaws(metrics, "jump_shot", keyframes).flaws}
    assert flaws["basketball_jumpshot_elbow_underextension"].key_frame == 22
    assert flaws["basketball_jumpshot_minimal_jump"].key_frame == 20
    plain = detect_basketball_flaws(metrics, "jump_shot").flaws
    assert all(f.key_frame is None for f in plain)


def test_has_injury_risk():
    assert has_injury_risk({"elbow_angle_at_release": 176})
    assert has_injury_risk({"stability_index": 59})
    assert not has_injury_risk({"elbow_angle_at_release": 170, "stability_index": 80})
    assert not has_injury_risk({"elbow_angle_at_release": None, "stability_index": float("nan")})


@pytest.mark.parametrize("action,count", [("spike", 7), ("serve", 5), ("block", 5), ("set", 4)])
def test_volleyball_rule_counts(action, count):
    assert detect_volleyball_flaws({}, action).rules_evaluated == count


def test_volleyball_spike_flaws():
    metrics = {"elbow_at_contact": 100, "stability": 30, "contact_height": 90}
    result = detect_volleyball_flaws(metrics, "spike")
    ids = {f.id for f in result.flaws}
    assert ids == {"volleyball_spike_low_elbow_extension", "volleyball_spike_low_stability"}
    assert result.overall_injury_risk == "high"
    assert result.summary == "2 flaws detected in your volleyball spike."


def test_set_elbow_out_of_window():
    bent = detect_volleyball_flaws({"elbow_angle": 60}, "set").flaws
    straight = detect_volleyball_flaws({"elbow_angle": 170}, "set").flaws
    assert len(bent) == 1 and len(straight) == 1
    assert bent[0].id != straight[0].id


def test_unknown_volleyball_action():
    result = detect_volleyball_flaws({}, "dig")
    assert result.summary == 'Flaw detection for volleyball action "dig" is not supported.'


def test_aggregate_injury_risk():
    assert aggregate_injury_risk([]) == "none"
    assert aggregate_injury_risk([_flaw(severity="high")]) == "none"
    assert aggregate_injury_risk([_flaw(injury=True)]) == "low"
    assert aggregate_injury_risk([_flaw(injury=True), _flaw(injury=True)]) == "moderate"
    assert aggregate_injury_risk([_flaw(injury=True), _flaw("high", True)]) == "high"


def test_sort_flaws():
    flaws = [_flaw("low", flaw_id="a"), _flaw("high", flaw_id="b"), _flaw("medium", True, "c")]
    assert [f.id for f in sort_flaws(flaws)] == ["c", "b", "a"]
    assert [f.id for f in sort_flaws(flaws, injury_first=False)] == ["b", "c", "a"]


def test_rule_confidence_helpers():
    assert ratio_confidence(5, 0) == 0.0
    assert ratio_confidence(-1, 10) == 0.0
    assert ratio_confidence(50, 10) == 1.0
    assert evaluate_if_present({"a": math.nan}, "a", lambda v: _flaw()) is None
    assert evaluate_if_present({}, "a", lambda v: _flaw()) is None


def test_unknown_condition_is_rejected():
    rule = FlawRule("r", "t", "{value}", "between", 10, 5, "form", (), "c")
    with pytest.raises(ValueError):
        rule.check(3)


def test_confidence_reference_overrides_threshold():
    rule = FlawRule("r", "t", "{percent:.0f}%", "below", 0.05, 0.08, "power", ("knee",), "c", confidence_ref=0.08)
    flaw = rule.check(0.04)
    assert flaw.confidence == pytest.approx(0.5)
    assert flaw.description == "4%"


def test_flaw_result_serializes():
    result = detect_basketball_flaws({"elbow_angle_at_release": 178}, "jump_shot")
    data = result.to_dict()
    assert data["overall_injury_risk"] == "low"
    assert data["flaws"][0]["drill"]["duration"] == "3 minutes"
    assert data["flaws"][0]["affected_body_parts"] == ["elbow"]
