from flaws.badminton import detect_badminton_flaws
from flaws.base import DetectedFlaw, Drill, FlawDetectionResult, FlawRule, RuleCheck, Video
from flaws.basketball import detect_basketball_flaws, has_injury_risk
from flaws.volleyball import detect_volleyball_flaws

__all__ = [
    "DetectedFlaw",
    "Drill",
    "FlawDetectionResult",
    "FlawRule",
    "RuleCheck",
    "Video",
    "detect_basketball_flaws",
    "detect_volleyball_flaws",
    "detect_badminton_flaws",
    "has_injury_risk",
]
