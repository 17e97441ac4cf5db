"""Flaw records and the rule machinery shared by every sport.

A sport's rule set is an ordered tuple of ``RuleCheck`` entries. Each entry
names one metric and holds one or more ``FlawRule`` variants; the first
variant whose condition fires produces the flaw for that check. Missing or
non-finite metrics skip the check entirely.
"""

from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from geometry import clamp, is_finite_number
from pose_types import Keyframes

SEVERITY_ORDER = {"high": 0, "medium": 1, "low": 2}

MetricsMap = Mapping[str, Optional[float]]


@dataclass(frozen=True)
class Drill:
    name: str
    description: str
    duration: str


@dataclass(frozen=True)
class Video:
    url: str
    title: str


@dataclass
class DetectedFlaw:
    id: str
    title: str
    description: str
    severity: str
    category: str
    injury_risk: bool
    affected_body_parts: List[str]
    correction: str
    confidence: float
    actual_value: Optional[float] = None
    threshold: Optional[float] = None
    ideal_range: Optional[str] = None
    injury_details: Optional[str] = None
    youtube_url: Optional[str] = None
    youtube_title: Optional[str] = None
    drill: Optional[Drill] = None
    key_frame: Optional[int] = None

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class FlawDetectionResult:
    flaws: List[DetectedFlaw] = field(default_factory=list)
    rules_evaluated: int = 0
    overall_injury_risk: str = "none"
    summary: str = ""

    def to_dict(self) -> Dict:
        return {
            "flaws": [flaw.to_dict() for flaw in self.flaws],
            "rules_evaluated": self.rules_evaluated,
            "overall_injury_risk": self.overall_injury_risk,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class FlawRule:
    """One threshold test on a metric value.

    ``description`` is a format string that may use ``{value}``, ``{percent}``
    (value * 100) and ``{magnitude}`` (absolute value). Confidence is the
    distance from ``confidence_ref`` (defaults to the threshold) divided by
    ``span``, clamped to [0, 1].
    """

    id: str
    title: str
    description: str
    condition: str
    threshold: float
    span: float
    category: str
    affected_body_parts: Tuple[str, ...]
    correction: str
    ideal_range: Optional[str] = None
    severity: str = "medium"
    high_below: Optional[float] = None
    injury: bool = False
    injury_below: Optional[float] = None
    injury_details: Optional[str] = None
    confidence_ref: Optional[float] = None
    video: Optional[Video] = None
    drill: Optional[Drill] = None

    def triggered(self, value: float) -> bool:
        if self.condition == "below":
            return value < self.threshold
        if self.condition == "above":
            return value > self.threshold
        raise ValueError(f"Unknown rule condition: {self.condition}")

    def check(self, value: float) -> Optional[DetectedFlaw]:
        if not self.triggered(value):
            return None

        severity = self.severity
        if self.high_below is not None and value < self.high_below:
            severity = "high"
        injury = self.injury or (self.injury_below is not None and value < self.injury_below)

        ref = self.threshold if self.confidence_ref is None else self.confidence_ref
        distance = ref - value if self.condition == "below" else value - ref

        return DetectedFlaw(
            id=self.id,
            title=self.title,
            description=self.description.format(value=value, percent=value * 100.0, magnitude=abs(value)),
            severity=severity,
            category=self.category,
            injury_risk=injury,
            affected_body_parts=list(self.affected_body_parts),
            correction=self.correction,
            confidence=ratio_confidence(distance, self.span),
            actual_value=value,
            threshold=self.threshold,
            ideal_range=self.ideal_range,
            injury_details=self.injury_details if injury else None,
            youtube_url=self.video.url if self.video else None,
            youtube_title=self.video.title if self.video else None,
            drill=self.drill,
        )


@dataclass(frozen=True)
class RuleCheck:
    metric: str
    variants: Tuple[FlawRule, ...]
    keyframe: Optional[str] = None

    def __call__(self, value: float) -> Optional[DetectedFlaw]:
        for rule in self.variants:
            flaw = rule.check(value)
            if flaw is not None:
                return flaw
        return None


def ratio_confidence(distance: float, span: float) -> float:
    if span <= 0:
        return 0.0
    return clamp(distance / span, 0.0, 1.0)


def evaluate_if_present(
    metrics: MetricsMap, key: str, check: Callable[[float], Optional[DetectedFlaw]]
) -> Optional[DetectedFlaw]:
    value = metrics.get(key)
    if not is_finite_number(value):
        return None
    return check(float(value))


def run_rules(
    metrics: MetricsMap, rules: Sequence[RuleCheck], keyframes: Optional[Keyframes] = None
) -> Tuple[List[DetectedFlaw], int]:
    flaws: List[DetectedFlaw] = []
    for rule in rules:
        flaw = evaluate_if_present(metrics, rule.metric, rule)
        if flaw is None:
            continue
        if keyframes is not None and rule.keyframe:
            flaw.key_frame = getattr(keyframes, rule.keyframe)
        flaws.append(flaw)
    return flaws, len(rules)


def aggregate_injury_risk(flaws: Sequence[DetectedFlaw]) -> str:
    injury_flaws = [f for f in flaws if f.injury_risk]
    if any(f.severity == "high" for f in injury_flaws):
        return "high"
    if len(injury_flaws) > 1:
        return "moderate"
    if len(injury_flaws) == 1:
        return "low"
    return "none"


def sort_flaws(flaws: List[DetectedFlaw], injury_first: bool = True) -> List[DetectedFlaw]:
    if injury_first:
        return sorted(flaws, key=lambda f: (not f.injury_risk, SEVERITY_ORDER[f.severity]))
    return sorted(flaws, key=lambda f: SEVERITY_ORDER[f.severity])


def build_result(flaws: List[DetectedFlaw], rules_evaluated: int, summary: str) -> FlawDetectionResult:
    return FlawDetectionResult(flaws, rules_evaluated, aggregate_injury_risk(flaws), summary)


def unsupported_result(summary: str) -> FlawDetectionResult:
    return FlawDetectionResult([], 0, "none", summary)


def count_summary(flaws: Sequence[DetectedFlaw], sport: str, action: str) -> str:
    if not flaws:
        return f"Great {action}! No significant form flaws detected."
    plural = "s" if len(flaws) > 1 else ""
    return f"{len(flaws)} flaw{plural} detected in your {sport} {action}."
