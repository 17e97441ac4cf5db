import logging
from typing import Mapping, Optional

from flaws.base import (
    Drill,
    FlawDetectionResult,
    FlawRule,
    MetricsMap,
    RuleCheck,
    Video,
    build_result,
    run_rules,
    sort_flaws,
    unsupported_result,
)
from geometry import is_finite_number
from pose_types import Keyframes

logger = logging.getLogger(__name__)

RELEASE_ANGLE_VIDEO = Video("https://www.youtube.com/watch?v=t7CzXHuGpBw", "How to Get Perfect Arc on Your Shot - ShotMechanics")
ELBOW_VIDEO = Video("https://www.youtube.com/watch?v=bX4LFxkiPvU", "Fix Your Elbow Position - Pro Shot Mechanics")
KNEE_VIDEO = Video("https://www.youtube.com/watch?v=XcMj8VTdwKc", "Use Your Legs in Your Shot - Basketball Training")
STABILITY_VIDEO = Video("https://www.youtube.com/watch?v=gT0kslvtnlI", "Balance & Footwork for Shooters - Coach Frikki")
JUMP_VIDEO = Video("https://www.youtube.com/watch?v=zzB8YBLJB1s", "Increase Your Vertical for Better Shooting")
FOLLOW_THROUGH_VIDEO = Video("https://www.youtube.com/watch?v=mvSHaFB8lPA", "Perfect Your Follow Through - Shooting Drills")
TIMING_VIDEO = Video("https://www.youtube.com/watch?v=eo1tppqCMjE", "Shot Timing and Rhythm - Pro Tips")
STANCE_URL = "https://www.youtube.com/watch?v=wSxbTnBFKa8"

SHOT_RULES = (
    RuleCheck(
        "release_angle",
        (
            FlawRule(
                id="basketball_jumpshot_low_release_angle",
                title="Low Release Angle",
                description=(
                    "Your release angle is {value:.1f}°, which creates a flat shot trajectory. This reduces "
                    "your margin for error and makes it harder to score consistently."
                ),
                condition="below",
                threshold=42,
                span=15,
                category="form",
                affected_body_parts=("wrist", "elbow"),
                ideal_range="50-55°",
                correction=(
                    "Focus on pushing the ball upward, not forward. Imagine shooting over a tall defender. "
                    "Your guide hand should release cleanly without pushing sideways."
                ),
                video=RELEASE_ANGLE_VIDEO,
                drill=Drill(
                    "One-Hand Form Shooting",
                    "Stand 3 feet from basket. Shoot with only your shooting hand, focusing on high arc. "
                    "Make 20 in a row.",
                    "5 minutes",
                ),
            ),
            FlawRule(
                id="basketball_jumpshot_high_release_angle",
                title="Excessive Release Angle",
                description=(
                    "Your release angle is {value:.1f}°, which creates a very steep shot. This requires more "
                    "force and reduces range."
                ),
                condition="above",
                threshold=65,
                span=15,
                severity="low",
                category="form",
                affected_body_parts=("wrist", "elbow"),
                ideal_range="50-55°",
                correction=(
                    "Your arc is too high. Focus on a more direct path to the basket while maintaining smooth "
                    "follow-through."
                ),
                video=RELEASE_ANGLE_VIDEO,
            ),
        ),
        keyframe="release",
    ),
    RuleCheck(
        "elbow_angle_at_release",
        (
            FlawRule(
                id="basketball_jumpshot_elbow_hyperextension",
                title="Elbow Hyperextension",
                description=(
                    "Your elbow angle at release is {value:.1f}°, approaching full lock. This limits your "
                    "wrist snap and control."
                ),
                condition="above",
                threshold=175,
                span=5,
                category="injury_risk",
                affected_body_parts=("elbow",),
                ideal_range="150-170°",
                injury=True,
                injury_details=(
                    "Repeated hyperextension of the elbow during shooting can lead to elbow strain, tendinitis, "
                    "and long-term joint damage. The elbow joint is not designed to support force at full extension."
                ),
                correction=(
                    "Maintain a slight bend in your elbow at release. This allows for proper follow-through and "
                    "reduces joint stress. Think \"extend, don't lock.\""
                ),
                video=ELBOW_VIDEO,
                drill=Drill(
                    "Elbow Position Drill",
                    "Practice your shooting motion in slow-motion, stopping at release. Check that you can see "
                    "a slight bend in your elbow in a mirror.",
                    "3 minutes",
                ),
            ),
            FlawRule(
                id="basketball_jumpshot_elbow_underextension",
                title="Under-Extended Elbow",
                description=(
                    "Your elbow angle at release is only {value:.1f}°. You're pushing the ball rather than "
                    "shooting it."
                ),
                condition="below",
                threshold=130,
                span=20,
                severity="high",
                category="form",
                affected_body_parts=("elbow", "shoulder"),
                ideal_range="150-170°",
                correction=(
                    "Extend your shooting arm more fully toward the basket. The power should come from your "
                    "legs, allowing your arm to extend naturally."
                ),
                video=ELBOW_VIDEO,
                drill=Drill(
                    "Extension Form Shooting",
                    "Close to the basket, focus on full arm extension on each shot. Freeze your follow-through "
                    "to check position.",
                    "5 minutes",
                ),
            ),
        ),
        keyframe="release",
    ),
    RuleCheck(
        "knee_angle_at_peak",
        (
            FlawRule(
                id="basketball_jumpshot_knee_underextension_severe",
                title="Poor Knee Extension",
                description=(
                    "Your knee angle at peak jump is only {value:.1f}°. You're not fully using your legs to "
                    "power the shot."
                ),
                condition="below",
                threshold=110,
                span=30,
                severity="high",
                category="power",
                affected_body_parts=("knee", "hip"),
                ideal_range="160-180°",
                correction=(
                    "Drive through your legs more explosively. Your legs should be nearly straight at the peak "
                    "of your jump. This generates power so your arms don't have to work as hard."
                ),
                video=KNEE_VIDEO,
                drill=Drill(
                    "Jump & Freeze",
                    "Practice jumping and freezing at the peak. Check your leg position. Repeat 10 times, "
                    "focusing on full extension.",
                    "3 minutes",
                ),
            ),
            FlawRule(
                id="basketball_jumpshot_knee_underextension_moderate",
                title="Incomplete Leg Drive",
                description=(
                    "Your knee angle at peak is {value:.1f}°. You could generate more power with fuller extension."
                ),
                condition="below",
                threshold=140,
                span=30,
                category="power",
                affected_body_parts=("knee",),
                ideal_range="160-180°",
                correction=(
                    "Focus on pushing through the floor and extending your legs fully. The jump should feel "
                    "explosive, not rushed."
                ),
                video=KNEE_VIDEO,
            ),
        ),
        keyframe="peak_jump",
    ),
    RuleCheck(
        "jump_height_normalized",
        (
            FlawRule(
                id="basketball_jumpshot_minimal_jump",
                title="Minimal Jump Height",
                description=(
                    "Your jump height is only {percent:.1f}% of body height. This makes your shot easier to block."
                ),
                condition="below",
                threshold=0.03,
                span=0.05,
                confidence_ref=0.05,
                severity="low",
                category="power",
                affected_body_parts=("knee", "ankle"),
                ideal_range="8-15% of body height",
                correction=(
                    "Focus on getting more elevation on your shot. Use your legs to jump up, not forward. This "
                    "creates a higher release point."
                ),
                video=JUMP_VIDEO,
            ),
            FlawRule(
                id="basketball_jumpshot_low_jump",
                title="Low Jump Height",
                description=(
                    "Your jump height is {percent:.1f}% of body height. More elevation would improve your shot."
                ),
                condition="below",
                threshold=0.05,
                span=0.08,
                confidence_ref=0.08,
                severity="low",
                category="power",
                affected_body_parts=("knee", "ankle"),
                ideal_range="8-15% of body height",
                correction=(
                    "Work on your vertical leap and timing. The jump should be part of your natural shooting rhythm."
                ),
                video=JUMP_VIDEO,
            ),
        ),
        keyframe="peak_jump",
    ),
    RuleCheck(
        "stability_index",
        (
            FlawRule(
                id="basketball_jumpshot_severe_instability",
                title="Severe Balance Issues",
                description=(
                    "Your stability index is {value:.0f}/100. Significant lateral movement is affecting your "
                    "shot and could cause injury."
                ),
                condition="below",
                threshold=60,
                span=30,
                severity="high",
                category="balance",
                affected_body_parts=("ankle", "knee", "hip"),
                ideal_range="85-100",
                injury=True,
                injury_details=(
                    "Landing off-balance after a jump shot puts excessive stress on your ankles and knees. This "
                    "increases the risk of sprains, ACL injuries, and chronic joint problems."
                ),
                correction=(
                    "Focus on shooting straight up and down. Your feet should land close to where they took off. "
                    "Practice with your feet shoulder-width apart."
                ),
                video=STABILITY_VIDEO,
                drill=Drill(
                    "Balance Landing Drill",
                    "Jump straight up, land softly in the same spot, hold for 2 seconds. Repeat 15 times. "
                    "Progress to jumping and shooting.",
                    "5 minutes",
                ),
            ),
            FlawRule(
                id="basketball_jumpshot_moderate_instability",
                title="Balance Needs Improvement",
                description=(
                    "Your stability index is {value:.0f}/100. Some lateral movement is reducing your consistency."
                ),
                condition="below",
                threshold=75,
                span=20,
                category="balance",
                affected_body_parts=("ankle", "hip"),
                ideal_range="85-100",
                correction="Work on core strength and footwork. Square your shoulders to the basket before shooting.",
                video=STABILITY_VIDEO,
            ),
        ),
    ),
    RuleCheck(
        "follow_through_score",
        (
            FlawRule(
                id="basketball_jumpshot_poor_followthrough",
                title="Incomplete Follow-Through",
                description=(
                    "Your follow-through score is {value:.0f}/100. You're not finishing your shot properly."
                ),
                condition="below",
                threshold=40,
                span=50,
                confidence_ref=50,
                category="form",
                affected_body_parts=("wrist", "elbow"),
                ideal_range="70-100",
                correction=(
                    "Hold your follow-through until the ball reaches the basket. Your wrist should be relaxed "
                    "and pointing down (the \"gooseneck\" position)."
                ),
                video=FOLLOW_THROUGH_VIDEO,
                drill=Drill(
                    "Freeze Follow-Through",
                    "Shoot and hold your follow-through for 3 seconds after every shot. Practice until it feels "
                    "natural.",
                    "5 minutes",
                ),
            ),
        ),
        keyframe="release",
    ),
    RuleCheck(
        "release_timing_ms",
        (
            FlawRule(
                id="basketball_jumpshot_late_release",
                title="Late Release",
                description=(
                    "You're releasing the ball {value:.0f}ms after your jump's peak. This reduces power and control."
                ),
                condition="above",
                threshold=80,
                span=100,
                confidence_ref=50,
                category="timing",
                affected_body_parts=("wrist", "elbow"),
                ideal_range="-50ms to 0ms (at or before peak)",
                correction=(
                    "Release the ball at or slightly before the peak of your jump. This uses your upward "
                    "momentum to help power the shot."
                ),
                video=TIMING_VIDEO,
            ),
            FlawRule(
                id="basketball_jumpshot_early_release",
                title="Very Early Release",
                description=(
                    "You're releasing the ball {magnitude:.0f}ms before your jump's peak. You may be rushing "
                    "your shot."
                ),
                condition="below",
                threshold=-120,
                span=80,
                severity="low",
                category="timing",
                affected_body_parts=("wrist", "elbow"),
                ideal_range="-50ms to 0ms (at or before peak)",
                correction=(
                    "Take your time on the shot. Let your jump develop before releasing. This adds power without "
                    "requiring more arm strength."
                ),
                video=TIMING_VIDEO,
            ),
        ),
        keyframe="release",
    ),
)

DRIBBLING_RULES = (
    RuleCheck(
        "knee_bend_score",
        (
            FlawRule(
                id="straight_knee_dribble",
                title="Standing Too Upright",
                description=(
                    "Your dribbling stance is too upright (stance depth score {value:.0f}/100). A proper "
                    "dribbling stance requires bent knees and lowered hips for quick reaction and ball protection."
                ),
                condition="below",
                threshold=35,
                span=20,
                high_below=15,
                category="form",
                affected_body_parts=("knee", "hip"),
                ideal_range="50–100 (low, bent-knee stance)",
                correction=(
                    "Bend your knees to lower your centre of gravity. Imagine sitting back into a quarter-squat. "
                    "This improves explosiveness and balance, and makes you harder to defend."
                ),
                video=Video(STANCE_URL, "Proper Dribbling Stance - Basketball IQ"),
            ),
        ),
    ),
    RuleCheck(
        "stance_width",
        (
            FlawRule(
                id="narrow_stance_dribble",
                title="Stance Too Narrow",
                description=(
                    "Your feet are close together while dribbling (≈{value:.0f}% shoulder width). A narrow "
                    "stance reduces stability and makes you easier to knock off balance."
                ),
                condition="below",
                threshold=70,
                span=20,
                category="balance",
                affected_body_parts=("ankle", "knee", "hip"),
                ideal_range="85–125% of shoulder width",
                correction=(
                    "Widen your stance to at least shoulder width. Plant your feet firmly with toes slightly out "
                    "to create a solid, balanced base for ball-handling."
                ),
                video=Video(STANCE_URL, "Improve Your Dribbling Stance - Basketball Training"),
            ),
        ),
    ),
    RuleCheck(
        "stance_width",
        (
            FlawRule(
                id="wide_stance_dribble",
                title="Stance Extremely Wide",
                description=(
                    "Your feet are extremely wide (≈{value:.0f}% shoulder width). While wide stances are normal "
                    "in drills, this excessive width limits lateral explosiveness."
                ),
                condition="above",
                threshold=220,
                span=40,
                severity="low",
                category="balance",
                affected_body_parts=("ankle", "knee"),
                ideal_range="70–180% of shoulder width",
                correction=(
                    "Bring your feet slightly closer together. This lets you explode in any direction without "
                    "the extra step needed from a super-wide base."
                ),
                video=Video(STANCE_URL, "Dribbling Footwork Fundamentals"),
            ),
        ),
    ),
    RuleCheck(
        "balance_score",
        (
            FlawRule(
                id="poor_balance_dribble",
                title="Inconsistent Body Balance",
                description=(
                    "Your body sways significantly while dribbling (balance score {value:.0f}/100). Lateral "
                    "movement without purpose tips off defenders and reduces control."
                ),
                condition="below",
                threshold=55,
                span=25,
                high_below=35,
                category="balance",
                affected_body_parts=("hip", "torso", "full_body"),
                ideal_range="70–100 (minimal sway)",
                correction=(
                    "Focus on keeping your torso still over your base. Practice stationary dribbling drills: "
                    "dribble in place while keeping your hips centred."
                ),
                video=Video("https://www.youtube.com/watch?v=gT0kslvtnlI", "Balance and Body Control While Dribbling"),
            ),
        ),
    ),
)


def _shot_summary(flaws) -> str:
    injury = sum(1 for f in flaws if f.injury_risk)
    high = sum(1 for f in flaws if f.severity == "high")
    if not flaws:
        return "Great job! No significant technique issues detected."
    if injury:
        return (
            f"Detected {len(flaws)} issue(s), including {injury} potential injury risk(s). "
            "Address these for safety."
        )
    if high:
        return f"Detected {len(flaws)} issue(s), including {high} high-priority item(s) to work on."
    return f"Detected {len(flaws)} minor issue(s) to improve your technique."


def _dribbling_summary(flaws) -> str:
    high = sum(1 for f in flaws if f.severity == "high")
    if not flaws:
        return "Great dribbling stance! No significant form issues detected."
    if high:
        return (
            f"Detected {len(flaws)} issue(s) with your dribbling posture, including {high} "
            "high-priority item(s)."
        )
    return f"Detected {len(flaws)} minor issue(s) to improve your dribbling form."


def detect_basketball_flaws(
    metrics: MetricsMap, action: str, keyframes: Optional[Keyframes] = None
) -> FlawDetectionResult:
    logger.debug("Detecting basketball flaws for action: %s", action)

    if action == "dribbling":
        flaws, evaluated = run_rules(metrics, DRIBBLING_RULES, keyframes)
        flaws = sort_flaws(flaws, injury_first=False)
        return build_result(flaws, evaluated, _dribbling_summary(flaws))

    if action == "layup":
        return unsupported_result("Layup technique evaluation focuses on scoring metrics above.")

    if action not in ("jump_shot", "free_throw"):
        logger.info("Basketball flaw detection not available for action: %s", action)
        return unsupported_result(f"Flaw detection for {action} is not yet available.")

    flaws, evaluated = run_rules(metrics, SHOT_RULES, keyframes)
    flaws = sort_flaws(flaws)
    result = build_result(flaws, evaluated, _shot_summary(flaws))
    logger.debug(
        "Basketball detection complete: %d flaws, %d rules, injury risk %s",
        len(flaws),
        evaluated,
        result.overall_injury_risk,
    )
    return result


def has_injury_risk(metrics: Mapping[str, Optional[float]]) -> bool:
    """Quick shooting check without building flaw records."""
    elbow = metrics.get("elbow_angle_at_release")
    if is_finite_number(elbow) and elbow > 175:
        return True
    stability = metrics.get("stability_index")
    if is_finite_number(stability) and stability < 60:
        return True
    return False


