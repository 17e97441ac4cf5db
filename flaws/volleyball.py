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

ARM_SWING_VIDEO = Video("https://www.youtube.com/watch?v=wFfOxMV_X0Y", "Volleyball Arm Swing Technique - Better at Beach")
CONTACT_VIDEO = Video("https://www.youtube.com/watch?v=zOYCFzlA5J4", "How to Hit a Volleyball - Contact Point & Arm Swing")
JUMP_VIDEO = Video("https://www.youtube.com/watch?v=wzS1gq2LIUY", "Volleyball Jump Training - Increase Your Vertical")
ROTATION_VIDEO = Video("https://www.youtube.com/watch?v=8BF9vDeQsOI", "Hip & Trunk Rotation for Volleyball Spikes")
BALANCE_VIDEO = Video("https://www.youtube.com/watch?v=JHzC4pCaHUQ", "Balance & Posture for Volleyball - Coaching Basics")
SERVE_VIDEO = Video("https://www.youtube.com/watch?v=KzWbdx6mbgw", "How to Serve a Volleyball - Overhand Float Serve")
BLOCK_VIDEO = Video("https://www.youtube.com/watch?v=mLnU0EcO3fA", "Volleyball Blocking Technique - Penetration & Timing")
SETTING_VIDEO = Video("https://www.youtube.com/watch?v=0YJZqnm-F0o", "Volleyball Setting: Hand Position & Symmetry")


def low_elbow(prefix: str, threshold: float = 140, ideal_range: str = "155–175°") -> RuleCheck:
    rule = FlawRule(
        id=f"{prefix}_low_elbow_extension",
        title="Arm Not Fully Extended",
        description=(
            "Your elbow angle at contact is {value:.1f}°. Full extension generates more power and control."
        ),
        condition="below",
        threshold=threshold,
        span=25,
        high_below=115,
        category="form",
        affected_body_parts=("elbow", "shoulder"),
        ideal_range=ideal_range,
        correction=(
            "Fully extend your hitting arm at contact. Think of reaching up and through the ball at the highest point."
        ),
        video=CONTACT_VIDEO,
        drill=Drill(
            "Wall Touch Extension Drill",
            "Stand arm-width from a wall, reach your hitting arm up the wall repeatedly, feeling full "
            "straightening each time.",
            "3 minutes",
        ),
    )
    return RuleCheck("elbow_at_contact", (rule,), keyframe="release")


def low_contact_height(prefix: str, threshold: float = 75) -> RuleCheck:
    rule = FlawRule(
        id=f"{prefix}_low_contact_height",
        title="Low Contact Point",
        description=(
            "Your contact height is {value:.0f}% of body height, lower than ideal. Hitting higher improves "
            "angle and reduces blocking."
        ),
        condition="below",
        threshold=threshold,
        span=20,
        high_below=60,
        category="form",
        affected_body_parts=("shoulder", "elbow", "wrist"),
        ideal_range="85–115% of body height",
        correction=(
            "Jump earlier and reach at your maximum height. Time your approach so you contact the ball at the "
            "peak of your jump."
        ),
        video=CONTACT_VIDEO,
    )
    return RuleCheck("contact_height", (rule,), keyframe="release")


def poor_body_alignment(prefix: str) -> RuleCheck:
    rule = FlawRule(
        id=f"{prefix}_poor_body_alignment",
        title="Poor Body Posture",
        description="Your body alignment score is {value:.0f}/100. Excessive trunk lean reduces power transfer.",
        condition="below",
        threshold=55,
        span=30,
        high_below=35,
        injury_below=35,
        injury_details=(
            "Extreme forward lean puts stress on the lower back and increases the risk of muscle strain during "
            "explosive movements."
        ),
        category="balance",
        affected_body_parts=("torso", "hip"),
        ideal_range="70–100",
        correction=(
            "Keep your torso upright as you approach. Lean forward slightly into the ball but avoid collapsing "
            "at the waist."
        ),
        video=BALANCE_VIDEO,
    )
    return RuleCheck("body_alignment", (rule,))


def low_stability(prefix: str) -> RuleCheck:
    rule = FlawRule(
        id=f"{prefix}_low_stability",
        title="Unstable Base",
        description="Stability score is {value:.0f}/100. Lateral hip sway is disrupting your power chain.",
        condition="below",
        threshold=60,
        span=30,
        high_below=40,
        injury_below=40,
        injury_details=(
            "Significant lateral movement during explosive actions increases ankle-sprain and knee-injury risk."
        ),
        category="balance",
        affected_body_parts=("hip", "ankle", "knee"),
        ideal_range="75–100",
        correction=(
            "Plant your feet firmly just before contact. Keep your hips square and drive power upward, not sideways."
        ),
        video=BALANCE_VIDEO,
    )
    return RuleCheck("stability", (rule,))


def low_trunk_rotation(prefix: str, threshold: float = 15) -> RuleCheck:
    rule = FlawRule(
        id=f"{prefix}_low_trunk_rotation",
        title="Insufficient Hip Rotation",
        description=(
            "Trunk rotation detected is only {value:.1f}°. Full hip-shoulder separation adds power."
        ),
        condition="below",
        threshold=threshold,
        span=15,
        category="power",
        affected_body_parts=("hip", "torso", "shoulder"),
        ideal_range="25–60°",
        correction=(
            "Load your hips during your approach step, then uncoil as your arm swings. Think \"hips first, then arm.\""
        ),
        video=ROTATION_VIDEO,
    )
    return RuleCheck("trunk_rotation", (rule,), keyframe="release")


SPIKE_RULES = (
    low_elbow("volleyball_spike"),
    low_contact_height("volleyball_spike", 78),
    RuleCheck(
        "arm_swing_score",
        (
            FlawRule(
                id="volleyball_spike_slow_arm_swing",
                title="Slow Arm Swing",
                description="Arm swing score is {value:.0f}/100. More whip speed generates a harder spike.",
                condition="below",
                threshold=45,
                span=30,
                high_below=25,
                category="power",
                affected_body_parts=("shoulder", "elbow", "wrist"),
                ideal_range="65–100",
                correction=(
                    "Accelerate your elbow pull-back before swinging through. Keep a relaxed wrist until "
                    "contact, then snap."
                ),
                video=ARM_SWING_VIDEO,
                drill=Drill(
                    "Towel Snap Drill",
                    "Hold a small towel and practice arm-swing motion, focusing on a sharp wrist snap at the end.",
                    "3 minutes",
                ),
            ),
        ),
    ),
    RuleCheck(
        "jump_height",
        (
            FlawRule(
                id="volleyball_spike_low_jump",
                title="Low Spike Jump Height",
                description="Jump height is {percent:.1f}% of body height, which limits attack angle.",
                condition="below",
                threshold=0.04,
                span=0.07,
                confidence_ref=0.07,
                severity="low",
                category="power",
                affected_body_parts=("knee", "ankle"),
                ideal_range="7–20% of body height",
                correction=(
                    "Use a full 3- or 4-step approach to build momentum. Plant hard on your last step and "
                    "explode upward."
                ),
                video=JUMP_VIDEO,
            ),
        ),
        keyframe="peak_jump",
    ),
    low_trunk_rotation("volleyball_spike"),
    poor_body_alignment("volleyball_spike"),
    low_stability("volleyball_spike"),
)

SERVE_RULES = (
    low_elbow("volleyball_serve", 135),
    low_contact_height("volleyball_serve", 72),
    low_trunk_rotation("volleyball_serve", 12),
    RuleCheck(
        "follow_through",
        (
            FlawRule(
                id="volleyball_serve_poor_follow_through",
                title="Incomplete Follow-Through",
                description=(
                    "Follow-through score is {value:.0f}/100. Cutting short the swing reduces speed and consistency."
                ),
                condition="below",
                threshold=50,
                span=40,
                category="form",
                affected_body_parts=("elbow", "wrist", "shoulder"),
                ideal_range="70–100",
                correction=(
                    "Let your arm continue across your body after contact. The follow-through should naturally "
                    "pull you into a balanced ready position."
                ),
                video=SERVE_VIDEO,
            ),
        ),
    ),
    low_stability("volleyball_serve"),
)

BLOCK_RULES = (
    RuleCheck(
        "jump_height",
        (
            FlawRule(
                id="volleyball_block_low_jump",
                title="Low Block Jump Height",
                description=(
                    "Jump height is {percent:.1f}% of body height. Higher blocks are harder to tip around."
                ),
                condition="below",
                threshold=0.03,
                span=0.05,
                confidence_ref=0.05,
                category="power",
                affected_body_parts=("knee", "ankle"),
                ideal_range="5–18% of body height",
                correction=(
                    "Bend knees lower into a ready squat before the block. Use a two-foot explosive jump timed "
                    "with the attacker's arm swing."
                ),
                video=JUMP_VIDEO,
            ),
        ),
        keyframe="peak_jump",
    ),
    RuleCheck(
        "arm_extension",
        (
            FlawRule(
                id="volleyball_block_low_arm_extension",
                title="Arms Not Fully Extended",
                description=(
                    "Average arm extension is {value:.1f}°. Straighter arms create a wider block surface."
                ),
                condition="below",
                threshold=140,
                span=30,
                high_below=115,
                category="form",
                affected_body_parts=("elbow", "shoulder"),
                ideal_range="155–177°",
                correction=(
                    "Push your arms straight up over the net, pressing actively over rather than just reaching up."
                ),
                video=BLOCK_VIDEO,
            ),
        ),
        keyframe="peak_jump",
    ),
    RuleCheck(
        "hand_height",
        (
            FlawRule(
                id="volleyball_block_low_hand_height",
                title="Block Too Low",
                description=(
                    "Hand height at block is {value:.0f}% of body height. Higher hands reduce gaps for attacker."
                ),
                condition="below",
                threshold=78,
                span=20,
                category="form",
                affected_body_parts=("wrist", "elbow", "shoulder"),
                ideal_range="85–115% of body height",
                correction=(
                    "Reach over the net as high as possible. Focus on a quick, snapping block motion to get "
                    "maximum penetration."
                ),
                video=BLOCK_VIDEO,
            ),
        ),
        keyframe="peak_jump",
    ),
    RuleCheck(
        "hand_symmetry",
        (
            FlawRule(
                id="volleyball_block_asymmetric_hands",
                title="Uneven Hand Position",
                description=(
                    "Hand symmetry is {value:.0f}/100. Uneven hands create gaps the attacker can exploit."
                ),
                condition="below",
                threshold=60,
                span=30,
                category="form",
                affected_body_parts=("wrist", "elbow"),
                ideal_range="80–100",
                correction=(
                    "Keep both hands at equal height with spread fingers. Think of forming a wall, not reaching "
                    "with one hand."
                ),
                video=BLOCK_VIDEO,
            ),
        ),
        keyframe="peak_jump",
    ),
    poor_body_alignment("volleyball_block"),
)

SET_RULES = (
    RuleCheck(
        "hand_symmetry",
        (
            FlawRule(
                id="volleyball_set_asymmetric_hands",
                title="Asymmetric Hand Contact",
                description=(
                    "Hand symmetry score is {value:.0f}/100. Uneven hands cause directional errors in your set."
                ),
                condition="below",
                threshold=55,
                span=30,
                high_below=35,
                category="form",
                affected_body_parts=("wrist", "elbow"),
                ideal_range="80–100",
                correction=(
                    "Form a triangle with your thumbs and index fingers before contact. Both hands must touch "
                    "the ball simultaneously."
                ),
                video=SETTING_VIDEO,
                drill=Drill(
                    "Wall Setting Drill",
                    "Set a volleyball against a wall repeatedly. Focus on equal pressure from both hands and "
                    "consistent release.",
                    "5 minutes",
                ),
            ),
        ),
    ),
    RuleCheck(
        "elbow_angle",
        (
            FlawRule(
                id="volleyball_set_elbow_too_bent",
                title="Arms Too Bent",
                description=(
                    "Elbow angle during set is only {value:.1f}°. Elbows should be comfortably bent, not cramped."
                ),
                condition="below",
                threshold=70,
                span=25,
                category="form",
                affected_body_parts=("elbow", "shoulder"),
                ideal_range="90–135°",
                correction=(
                    "Keep your elbows out and forward, about shoulder width. Avoid pulling them into your body."
                ),
                video=SETTING_VIDEO,
            ),
            FlawRule(
                id="volleyball_set_elbow_too_straight",
                title="Arms Too Straight for Setting",
                description=(
                    "Elbow angle is {value:.1f}°. Straighter arms during the set reduce touch sensitivity."
                ),
                condition="above",
                threshold=155,
                span=20,
                severity="low",
                category="form",
                affected_body_parts=("elbow",),
                ideal_range="90–135°",
                correction=(
                    "Relax into a comfortable bend (like holding a ball above your head) to maintain touch and control."
                ),
                video=SETTING_VIDEO,
            ),
        ),
    ),
    poor_body_alignment("volleyball_set"),
    low_stability("volleyball_set"),
)

RULE_SETS = {
    "spike": SPIKE_RULES,
    "serve": SERVE_RULES,
    "block": BLOCK_RULES,
    "set": SET_RULES,
}


def detect_volleyball_flaws(
    metrics: MetricsMap, action: str, keyframes: Optional[Keyframes] = None
) -> FlawDetectionResult:
    logger.debug("Detecting volleyball flaws for action: %s", action)
    rules = RULE_SETS.get(action)
    if rules is None:
        logger.warning("Unknown volleyball action: %s", action)
        return unsupported_result(f'Flaw detection for volleyball action "{action}" is not supported.')

    flaws, evaluated = run_rules(metrics, rules, keyframes)
    return build_result(flaws, evaluated, count_summary(flaws, "volleyball", action))
