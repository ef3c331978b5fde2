"""
Command-line entry point.

Usage:
    attainment-report PAPER_JSON MARKS_JSON [--threshold 60]
        [--indirect CO1=2.5 ...] [--choice-group 1,2 ...] [--strict] [-v]

Prints the attainment report as JSON on stdout. Invalid input is reported
on stderr with exit status 2.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from attainment_toolkit import __version__
from attainment_toolkit.common.thresholds import ATTAINMENT_THRESHOLDS
from attainment_toolkit.controller import build_attainment_report
from attainment_toolkit.core.schemas.validator import ValidationError
from attainment_toolkit.core.utils.serialization import (
    load_question_paper_json,
    load_student_marks_json,
)
from attainment_toolkit.scoring.config import AttainmentConfig

logger = logging.getLogger("attainment_toolkit")

EXIT_INVALID_INPUT = 2


def _parse_indirect(pairs: Sequence[str]) -> dict[str, float]:
    """Parse ["CO1=2.5", ...] into a mapping (range checked by AttainmentConfig)."""
    indirect: dict[str, float] = {}
    for pair in pairs:
        co, sep, value = pair.partition("=")
        if not sep or not co.strip():
            raise argparse.ArgumentTypeError(f"expected CO=VALUE, got {pair!r}")
        try:
            indirect[co.strip()] = float(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"indirect value for {co.strip()} is not a number: {value!r}")
    return indirect


def _parse_choice_group(text: str) -> frozenset[int]:
    try:
        return frozenset(int(part) for part in text.split(",") if part.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated question numbers, got {text!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="attainment-report",
        description="Compute student totals and CO attainment for a question paper",
    )
    parser.add_argument("paper", type=Path, help="Question paper payload (JSON)")
    parser.add_argument("marks", type=Path, help="Student marks payload (JSON)")
    parser.add_argument(
        "--threshold",
        type=float,
        default=ATTAINMENT_THRESHOLDS.default_target_percent,
        help="Target threshold as a percentage of CO max marks (default: %(default)s)",
    )
    parser.add_argument(
        "--indirect",
        action="append",
        default=[],
        metavar="CO=VALUE",
        help="Indirect attainment for a CO in [0, 3]; repeatable",
    )
    parser.add_argument(
        "--choice-group",
        action="append",
        type=_parse_choice_group,
        metavar="N,M",
        help="Mutually-exclusive main questions; repeatable (default: 1,2 and 3,4)",
    )
    parser.add_argument(
        "--no-choice",
        action="store_true",
        help="Treat every main question as compulsory",
    )
    parser.add_argument("--strict", action="store_true", help="Validate payloads against JSON schemas")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        indirect = _parse_indirect(args.indirect)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    choice_groups = () if args.no_choice else args.choice_group

    try:
        paper = load_question_paper_json(args.paper, choice_groups=choice_groups, strict=args.strict)
        students = load_student_marks_json(args.marks, strict=args.strict)
        config = AttainmentConfig(threshold_percent=args.threshold, indirect=indirect)
        report = build_attainment_report(paper, students, config)
    except ValidationError as e:
        location = f" at {e.path}" if e.path else ""
        print(f"error: {e}{location}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    json.dump(report.to_dict(), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
