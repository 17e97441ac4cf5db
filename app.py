import argparse
import json
import logging
import sys

from analysis import AnalysisConfig, AnalysisResult, analyze_session
from benchmark_registry import get_benchmark_sports, get_supported_actions
from frame_processor import ProcessingConfig
from pose_detection import extract_pose_frames
from scoring import get_letter_grade, get_performance_level, get_weakest_metrics

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Score a sports clip against technique benchmarks")
    parser.add_argument("video", help="Path to the video file")
    parser.add_argument("--sport", default="basketball", choices=get_benchmark_sports(), help="Sport to analyze")
    parser.add_argument("--action", default="jump_shot", help="Action within the sport (e.g. jump_shot, spike)")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--no-smoothing", action="store_true", help="Skip landmark smoothing")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def print_report(result: AnalysisResult) -> None:
    scoring = result.scoring
    print(f"{result.sport} / {result.action}")
    for issue in result.issues:
        print(f"  Issue: {issue}")
    print(
        f"Score: {scoring.overall_score:.0f} ({get_letter_grade(scoring.overall_score)}, "
        f"{get_performance_level(scoring.overall_score)})"
    )
    print(f"Confidence: {scoring.confidence:.2f} ({scoring.metrics_included}/{scoring.metrics_total} metrics)")

    if scoring.breakdown:
        print("Breakdown:")
        for key, value in scoring.breakdown.items():
            raw = result.metrics.get(key)
            print(f"  {key:<24} {value:5.0f}   (measured {raw})")
        weakest = get_weakest_metrics(scoring.breakdown)
        print(f"Work on: {', '.join(weakest)}")

    flaws = result.flaws
    print(f"Flaws: {flaws.summary}")
    if flaws.overall_injury_risk != "none":
        print(f"Injury risk: {flaws.overall_injury_risk}")
    for flaw in flaws.flaws:
        marker = " [injury risk]" if flaw.injury_risk else ""
        print(f"  - [{flaw.severity}] {flaw.title}{marker}")
        print(f"    {flaw.correction}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    actions = get_supported_actions(args.sport)
    if args.action not in actions:
        print(f"Error: unsupported action '{args.action}' for {args.sport}. Choose from: {', '.join(actions)}")
        return 1

    try:
        frames, fps, duration = extract_pose_frames(args.video)
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1
    logger.info("Loaded %d frames (%.1f fps, %.2fs)", len(frames), fps, duration)

    config = AnalysisConfig(processing=ProcessingConfig(enable_smoothing=not args.no_smoothing))
    result = analyze_session(frames, args.sport, args.action, duration, config)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_report(result)
    return 0 if result.processed is not None else 1


if __name__ == "__main__":
    sys.exit(main())
