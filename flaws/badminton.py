import logging
from typing import Optional

from flaws.base import (
    Drill,
    FlawDetectionResult,
    FlawRule,
    MetricsMap,
    RuleCheck,
    Video,
    build_result,
    count_summary,
    run_rules,
    unsupported_result,
)
from pose_types import Keyframes

logger = logging.getLogger(__name__)

SMASH_VIDEO = Video("https://www.youtube.com/watch?v=J7BtEWnAHZ0", "Badminton Smash Technique - Arm Swing & Contact")
CLEAR_VIDEO = Video("https://www.youtube.com/watch?v=q43OfE7amL0", "How to Play a Perfect Badminton Clear")
DROP_SHOT_VIDEO = Video("https://www.youtube.com/watch?v=mhJSBj7sJxg", "Badminton Drop Shot - Technique & Disguise")
SERVE_VIDEO = Video("https://www.youtube.com/watch?v=4xF1SHRwFp0", "Badminton Serve Technique - Short & Long")
FOOTWORK_VIDEO = Video("https://www.youtube.com/watch?v=RqRCWSSvsBU", "Badminton Footwork & Balance Drills")
ROTATION_VIDEO = Video("https://www.youtube.com/watch?v=8BF9vDeQsOI", "Hip Rotation for Racket Sports Power")
WRIST_VIDEO = Video("https://www.youtube.com/watch?v=PIRdE9oW9bc", "Badminton Wrist Flick & Speed Exercises")

# Display names used in summaries.
ACTION_NAMES = {"smash": "smash", "clear": "clear", "drop_shot": "drop shot", "serve": "serve"}


def low_elbow(prefix: str, threshold: float = 140, ideal_range: str = "155–177°") -> RuleCheck:
    rule = FlawRule(
        id=f"{prefix}_low_elbow_extension",
        title="Arm Not Fully Extended at Contact",
        description=(
            "Elbow angle at contact is {value:.1f}°. A straighter arm produces more power and reach."
        ),
        condition="below",
        threshold=threshold,
        span=25,
        high_below=115,
        category="form",
        affected_body_parts=("elbow", "shoulder"),
        ideal_range=ideal_range,
        correction=(
            "Extend your racket arm fully at the moment of contact. Think of \"reaching\" past the shuttle, "
            "not hitting at it."
        ),
        video=SMASH_VIDEO,
    )
    return RuleCheck("elbow_at_contact", (rule,), keyframe="release")


def low_contact_height(prefix: str, threshold: float, ideal_range: str) -> RuleCheck:
    rule = FlawRule(
        id=f"{prefix}_low_contact_height",
        title="Low Contact Point",
        description=(
            "Contact height is {value:.0f}% of body height. Higher contact improves shuttle angle."
        ),
        condition="below",
        threshold=threshold,
        span=20,
        high_below=threshold - 18,
        category="form",
        affected_body_parts=("shoulder", "elbow", "wrist"),
        ideal_range=ideal_range,
        correction=(
            "Time your footwork so you arrive underneath the shuttle. Reach at your maximum extension point."
        ),
        video=SMASH_VIDEO,
    )
    return RuleCheck("contact_height", (rule,), keyframe="release")


def low_follow_through(prefix: str, video: Video) -> RuleCheck:
    rule = FlawRule(
        id=f"{prefix}_poor_follow_through",
        title="Incomplete Follow-Through",
        description=(
            "Follow-through score is {value:.0f}/100. Stopping your swing early reduces power and consistency."
        ),
        condition="below",
        threshold=45,
        span=35,
        high_below=25,
        category="form",
        affected_body_parts=("wrist", "elbow", "shoulder"),
        ideal_range="65–100",
        correction=(
            "Let your arm swing fully across your body after contact. The follow-through protects your shoulder "
            "and adds spin and pace."
        ),
        video=video,
    )
    return RuleCheck("follow_through", (rule,))


def low_trunk_rotation(prefix: str, threshold: float = 15) -> RuleCheck:
    rule = FlawRule(
        id=f"{prefix}_low_trunk_rotation",
        title="Insufficient Hip & Shoulder Rotation",
        description=(
            "Trunk rotation is only {value:.1f}°. Hip-shoulder separation is the primary power source in "
            "racket sports."
        ),
        condition="below",
        threshold=threshold,
        span=15,
        category="power",
        affected_body_parts=("hip", "torso", "shoulder"),
        ideal_range="25–60°",
        correction=(
            "Load your hips by turning your non-dominant side toward the shuttle first, then uncoil hips before "
            "your arm swings."
        ),
        video=ROTATION_VIDEO,
    )
    return RuleCheck("trunk_rotation", (rule,), keyframe="release")


def poor_body_alignment(prefix: str) -> RuleCheck:
    rule = FlawRule(
        id=f"{prefix}_poor_body_alignment",
        title="Poor Body Posture",
        description=(
            "Body alignment score is {value:.0f}/100. Excessive trunk lean reduces power and court vision."
        ),
        condition="below",
        threshold=55,
        span=30,
        high_below=35,
        injury_below=35,
        injury_details="Extreme lean puts strain on the lower back and hamstrings in fast-movement contexts.",
        category="balance",
        affected_body_parts=("torso", "hip"),
        ideal_range="65–100",
        correction="Stay tall through your strokes. A slight forward lean is fine, but keep your core engaged.",
        video=FOOTWORK_VIDEO,
    )
    return RuleCheck("body_alignment", (rule,))


def low_stability(prefix: str) -> RuleCheck:
    rule = FlawRule(
        id=f"{prefix}_low_stability",
        title="Unstable Base",
        description="Stability score is {value:.0f}/100. Lateral sway bleeds power from your shot.",
        condition="below",
        threshold=60,
        span=30,
        high_below=40,
        injury_below=40,
        injury_details="Significant body sway during racket-sport strokes increases knee and ankle strain risk.",
        category="balance",
        affected_body_parts=("hip", "ankle", "knee"),
        ideal_range="75–100",
        correction=(
            "Ground yourself with a wide, stable stance before each stroke. Return to a balanced ready position "
            "after each shot."
        ),
        video=FOOTWORK_VIDEO,
    )
    return RuleCheck("stability", (rule,))


SMASH_RULES = (
    low_elbow("badminton_smash"),
    low_contact_height("badminton_smash", 80, "90–125% of body height"),
    low_trunk_rotation("badminton_smash"),
    RuleCheck(
        "wrist_speed",
        (
            FlawRule(
                id="badminton_smash_low_wrist_speed",
                title="Slow Wrist Snap",
                description=(
                    "Wrist speed score is {value:.0f}/100. A faster wrist snap is the key to a sharp smash."
                ),
                condition="below",
                threshold=40,
                span=30,
                high_below=20,
                category="power",
                affected_body_parts=("wrist",),
                ideal_range="60–100",
                correction=(
                    "Keep your wrist cocked back until just before contact, then snap it forward explosively. "
                    "Practice shadow strokes focusing on a late, fast wrist action."
                ),
                video=WRIST_VIDEO,
                drill=Drill(
                    "Wrist Flick Against Shuttle",
                    "Hold a shuttle in your non-racket hand. Flick it upward with only your racket wrist. "
                    "Increase speed over 50 reps.",
                    "3 minutes",
                ),
            ),
        ),
        keyframe="release",
    ),
    low_follow_through("badminton_smash", SMASH_VIDEO),
    poor_body_alignment("badminton_smash"),
)

CLEAR_RULES = (
    low_elbow("badminton_clear", 135, "150–177°"),
    low_contact_height("badminton_clear", 75, "82–118% of body height"),
    low_trunk_rotation("badminton_clear", 12),
    low_follow_through("badminton_clear", CLEAR_VIDEO),
    poor_body_alignment("badminton_clear"),
)

DROP_SHOT_RULES = (
    low_contact_height("badminton_drop_shot", 55, "65–98% of body height"),
    RuleCheck(
        "elbow_angle",
        (
            FlawRule(
                id="badminton_drop_shot_elbow_too_bent",
                title="Elbow Too Bent for Drop Shot",
                description=(
                    "Elbow angle is only {value:.1f}°. This limits racket reach and shot disguise."
                ),
                condition="below",
                threshold=100,
                span=30,
                category="form",
                affected_body_parts=("elbow",),
                ideal_range="118–162°",
                correction=(
                    "Your arm should be comfortably extended: not straight, but not cramped. Think of "
                    "\"guiding\" the shuttle over the net."
                ),
                video=DROP_SHOT_VIDEO,
            ),
        ),
        keyframe="release",
    ),
    low_trunk_rotation("badminton_drop_shot", 8),
    poor_body_alignment("badminton_drop_shot"),
    low_stability("badminton_drop_shot"),
)

SERVE_RULES = (
    low_stability("badminton_serve"),
    RuleCheck(
        "elbow_at_contact",
        (
            FlawRule(
                id="badminton_serve_elbow_too_bent",
                title="Elbow Too Bent at Serve",
                description=(
                    "Elbow angle at serve contact is {value:.1f}°. This cramps the swing and reduces consistency."
                ),
                condition="below",
                threshold=95,
                span=40,
                category="form",
                affected_body_parts=("elbow",),
                ideal_range="120–165°",
                correction=(
                    "Relax your arm into a comfortable semi-extended position. Let the shuttle drop to a "
                    "consistent toss height before striking."
                ),
                video=SERVE_VIDEO,
            ),
        ),
        keyframe="release",
    ),
    low_follow_through("badminton_serve", SERVE_VIDEO),
    poor_body_alignment("badminton_serve"),
)

RULE_SETS = {
    "smash": SMASH_RULES,
    "clear": CLEAR_RULES,
    "drop_shot": DROP_SHOT_RULES,
    "serve": SERVE_RULES,
}


def detect_badminton_flaws(
    metrics: MetricsMap, action: str, keyframes: Optional[Keyframes] = None
) -> FlawDetectionResult:
    logger.debug("Detecting badminton flaws for action: %s", action)
    rules = RULE_SETS.get(action)
    if rules is None:
        logger.warning("Unknown badminton action: %s", action)
        return unsupported_result(f'Flaw detection for badminton action "{action}" is not supported.')

    flaws, evaluated = run_rules(metrics, rules, keyframes)
    return build_result(flaws, evaluated, count_summary(flaws, "badminton", ACTION_NAMES[action]))
