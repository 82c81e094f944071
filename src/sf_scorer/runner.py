"""
sf-scorer CLI Runner

Scores a slot-filling response file against an assessment key.

Usage:
    python -m sf_scorer.runner responses.tsv key.tsv
    python -m sf_scorer.runner responses.tsv key.tsv --anydoc --nocase --trace
    python -m sf_scorer.runner responses.tsv key.tsv --slots queries.txt --output-dir results
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from sf_scorer.domain.entities import ScoreReport
from sf_scorer.domain.value_objects import InvalidJudgmentError
from sf_scorer.scorer_config import ScoringPolicy, load_policy, log_level_from_env
from sf_scorer.use_cases.evaluation import (
    format_summary,
    responses_frame,
    run_scoring,
    slot_confidence_frame,
    summary_frame,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="sf-scorer: Score slot-filling responses against an assessment key",
    )
    parser.add_argument("response_file", help="System response file (tab-separated)")
    parser.add_argument("key_file", help="Assessment key file (tab-separated)")
    parser.add_argument(
        "--trace",
        action="store_true",
        default=None,
        help="Print a line with the assessment of each system response",
    )
    parser.add_argument(
        "--anydoc",
        action="store_true",
        default=None,
        help="Judge responses on the filler only, ignoring doc id and justification offsets",
    )
    parser.add_argument(
        "--ignore-offsets",
        action="store_true",
        default=None,
        help="Judge responses on filler and doc id, ignoring justification offsets",
    )
    parser.add_argument(
        "--nocase",
        action="store_true",
        default=None,
        help="Ignore case when matching fillers",
    )
    parser.add_argument(
        "--slots",
        default=None,
        help="File listing entity:slot queries to score (default: queries seen in the responses)",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for summary/slot_confidence/responses CSV files (default: no CSV output)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: SF_SCORER_LOG_LEVEL from .env, or WARNING)",
    )
    return parser.parse_args(argv)


def build_policy(args: argparse.Namespace) -> ScoringPolicy:
    """Policy from the environment, overridden by command-line flags"""
    policy = load_policy()
    return ScoringPolicy(
        trace=args.trace if args.trace is not None else policy.trace,
        any_doc=args.anydoc if args.anydoc is not None else policy.any_doc,
        ignore_offsets=args.ignore_offsets if args.ignore_offsets is not None else policy.ignore_offsets,
        no_case=args.nocase if args.nocase is not None else policy.no_case,
        slots_path=args.slots if args.slots is not None else policy.slots_path,
    )


def _save_outputs(report: ScoreReport, output_dir: Path) -> list[Path]:
    """Write the summary, slot confidence, and per-response CSV files."""
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for name, frame in (
        ("summary.csv", summary_frame(report)),
        ("slot_confidence.csv", slot_confidence_frame(report)),
        ("responses.csv", responses_frame(report)),
    ):
        path = output_dir / name
        frame.to_csv(path, index=False)
        paths.append(path)
    return paths


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(
        level=(args.log_level or log_level_from_env()).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    policy = build_policy(args)

    try:
        report = run_scoring(args.response_file, args.key_file, policy)
    except FileNotFoundError as e:
        print(f"ERROR: {e}")
        return 1
    except InvalidJudgmentError as e:
        print(f"ERROR: {e}")
        return 1

    if policy.trace:
        for result in report.responses:
            print(result.trace_line())

    for line in format_summary(report, policy.slots_path):
        print(line)

    if args.output_dir:
        paths = _save_outputs(report, Path(args.output_dir))
        print("\n=== Output ===\n")
        for path in paths:
            print(f"  {path}")
        print()

    return 0


if __name__ == "__main__":
    sys.exit(main())
