"""
CX Engine CLI
=============

Command-line interface for offline feedback analysis. Every command prints JSON.

Commands:
    classify     - Classify each input line (or --text) for sentiment
    root-causes  - Extract root causes from input lines
    nps          - Compute NPS from one score per line
    batch        - Full batch analysis of a JSON list of feedback items

Usage:
    python -m cxengine.orchestrator.cli classify --text "Delivery was late"
    python -m cxengine.orchestrator.cli root-causes complaints.txt
    cat scores.txt | python -m cxengine.orchestrator.cli nps
    python -m cxengine.orchestrator.cli batch feedback.json
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from ..analysis.aggregation import InvalidScoreError, compute_nps, validate_nps_score
from ..analysis.root_cause_extractor import extract_root_causes
from ..analysis.sentiment_classifier import classify_sentiment
from ..config import get_settings
from .batch_analysis import BatchAnalyzer, FeedbackItem
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def _read_lines(path: Optional[str]) -> List[str]:
    """Non-empty stripped lines from a file, or stdin when path is None or '-'."""
    if path is None or path == "-":
        raw = sys.stdin.read()
    else:
        with open(path, encoding="utf-8") as f:
            raw = f.read()
    return [line.strip() for line in raw.splitlines() if line.strip()]


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def cmd_classify(args) -> int:
    """Classify sentiment of --text or of every input line."""
    texts = [args.text] if args.text is not None else _read_lines(args.input)
    _print_json([
        {"text": text, **classify_sentiment(text).to_dict()}
        for text in texts
    ])
    return 0


def cmd_root_causes(args) -> int:
    """Extract root causes from input lines."""
    texts = _read_lines(args.input)
    limit = args.limit or get_settings().engine.root_cause_sample_limit
    _print_json([rc.to_dict() for rc in extract_root_causes(texts[:limit])])
    return 0


def cmd_nps(args) -> int:
    """Compute NPS from one 0-10 score per line."""
    scores = []
    for line in _read_lines(args.input):
        try:
            scores.append(validate_nps_score(float(line)))
        except (ValueError, InvalidScoreError) as e:
            print(f"ERROR: invalid score '{line}': {e}", file=sys.stderr)
            return 1
    _print_json(compute_nps(scores).to_dict())
    return 0


def cmd_batch(args) -> int:
    """Run the full batch pipeline on a JSON list of {id, content, nps_score?}."""
    if args.input is None or args.input == "-":
        records = json.load(sys.stdin)
    else:
        with open(args.input, encoding="utf-8") as f:
            records = json.load(f)

    items = [
        FeedbackItem(id=r.get("id", i), content=r.get("content", ""), nps_score=r.get("nps_score"))
        for i, r in enumerate(records)
    ]
    result = BatchAnalyzer(get_settings().engine).run(items)
    _print_json(result.get_summary())
    return 1 if result.failed else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cxengine",
        description="Offline customer-feedback analytics",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("classify", help="Classify sentiment")
    p.add_argument("input", nargs="?", help="Text file, one feedback per line (default: stdin)")
    p.add_argument("--text", help="Classify this text instead of reading input")
    p.set_defaults(func=cmd_classify)

    p = sub.add_parser("root-causes", help="Extract root causes")
    p.add_argument("input", nargs="?", help="Text file, one feedback per line (default: stdin)")
    p.add_argument("--limit", type=int, help="Max texts to analyze (default: CX_ROOT_CAUSE_SAMPLE_LIMIT)")
    p.set_defaults(func=cmd_root_causes)

    p = sub.add_parser("nps", help="Compute NPS")
    p.add_argument("input", nargs="?", help="File with one 0-10 score per line (default: stdin)")
    p.set_defaults(func=cmd_nps)

    p = sub.add_parser("batch", help="Full batch analysis")
    p.add_argument("input", nargs="?", help="JSON file with feedback items (default: stdin)")
    p.set_defaults(func=cmd_batch)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(
        level="DEBUG" if args.verbose else settings.logging.level,
        json_output=settings.logging.json_logs,
        log_file=settings.logging.log_file,
    )
    try:
        return args.func(args)
    except (OSError, json.JSONDecodeError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        logger.debug("Command failed", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
