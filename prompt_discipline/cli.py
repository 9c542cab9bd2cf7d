"""Command-line interface for prompt triage and session scorecards.

Usage:
    prompt-discipline triage "fix the login bug in src/auth/login.ts"
    prompt-discipline scorecard --project my-app --period week
    prompt-discipline scorecard --output pdf --output-path report.pdf
    prompt-discipline serve --port 9877
"""

import argparse
import logging
import sys
from pathlib import Path

from .core.config import STRICTNESS_LEVELS, load_config
from .core.scorecard_service import (
    OUTPUT_FORMATS,
    PERIODS,
    REPORT_TYPES,
    ScorecardRequest,
    ScorecardService,
)
from .core.triage import triage


def run_triage(args: argparse.Namespace) -> int:
    config = load_config(args.project_dir).triage_config()
    if args.strictness:
        config.strictness = args.strictness

    result = triage(args.prompt, config)
    print(f"Level:      {result.level}")
    print(f"Confidence: {result.confidence:.2f}")
    if result.reasons:
        print("Reasons:")
        for reason in result.reasons:
            print(f"  • {reason}")
    if result.recommended_tools:
        print(f"Tools:      {', '.join(result.recommended_tools)}")
    return 0


def run_scorecard(args: argparse.Namespace) -> int:
    project_dir = args.project_dir if args.git else None
    service = ScorecardService(claude_dir=args.claude_dir, project_dir=project_dir)
    result = service.generate(
        ScorecardRequest(
            project=args.project,
            period=args.period,
            session_id=args.session_id,
            since=args.since,
            output=args.output,
            output_path=args.output_path,
            report_type=args.report_type,
            compare_projects=args.compare or [],
        )
    )
    print(result.text)
    return 0


def run_serve(args: argparse.Namespace) -> int:
    from .api.server import serve

    serve(args.host, args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prompt-discipline",
        description="Triage prompts and score coding-assistant sessions",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    triage_parser = subparsers.add_parser("triage", help="Classify a prompt before acting on it")
    triage_parser.add_argument("prompt", help="Prompt text to classify")
    triage_parser.add_argument(
        "--project-dir",
        type=Path,
        default=Path.cwd(),
        help="Project root holding .preflight/ (default: current directory)",
    )
    triage_parser.add_argument("--strictness", choices=STRICTNESS_LEVELS, help="Override configured strictness")
    triage_parser.set_defaults(handler=run_triage)

    scorecard_parser = subparsers.add_parser("scorecard", help="Score sessions and render a report")
    scorecard_parser.add_argument("--project", help="Project name (substring match)")
    scorecard_parser.add_argument("--period", choices=PERIODS, default="day")
    scorecard_parser.add_argument("--session-id", help="Score a single session")
    scorecard_parser.add_argument("--since", help="Start date: ISO date or relative like '7days'")
    scorecard_parser.add_argument("--output", choices=OUTPUT_FORMATS, default="markdown")
    scorecard_parser.add_argument("--output-path", help="Where to write the PDF")
    scorecard_parser.add_argument("--report-type", choices=REPORT_TYPES, default="scorecard")
    scorecard_parser.add_argument("--compare", nargs="+", metavar="PROJECT", help="Projects for a comparative report")
    scorecard_parser.add_argument("--claude-dir", type=Path, help="Claude config directory (default: ~/.claude)")
    scorecard_parser.add_argument(
        "--git",
        action="store_true",
        help="Attach commits from the git repository in --project-dir",
    )
    scorecard_parser.add_argument("--project-dir", type=Path, default=Path.cwd())
    scorecard_parser.set_defaults(handler=run_scorecard)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=9877)
    serve_parser.set_defaults(handler=run_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    try:
        return args.handler(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
