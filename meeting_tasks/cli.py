"""Command-line entry point: extract tasks from a notes file and print JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

from meeting_tasks.config import settings
from meeting_tasks.extraction.pipeline import extract_tasks
from meeting_tasks.pipeline_config import ExtractionProvider


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="meeting-tasks",
        description=(
            "Extract actionable tasks from meeting notes or transcripts.\n\n"
            "Reads plain text (bullets, prose or timestamped speaker lines) and\n"
            "prints the refined task list with extraction metadata as JSON."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "file",
        nargs="?",
        default="-",
        metavar="FILE",
        help="Notes file to read; '-' or omitted reads stdin.",
    )
    parser.add_argument(
        "--provider",
        choices=[p.value for p in ExtractionProvider],
        default=None,
        help=(
            "Extraction backend (default: EXTRACTION_PROVIDER setting, "
            f"currently {settings.extraction_provider!r}). External providers "
            "fall back to heuristics on failure."
        ),
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        metavar="YYYY-MM-DD",
        help="Reference date for relative deadlines such as 'tomorrow' (default: today).",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity, written to stderr.",
    )

    return parser


def _read_notes(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        notes = _read_notes(args.file)
    except OSError as exc:
        print(f"ERROR: Could not read {args.file}: {exc}", file=sys.stderr)
        return 1

    if len(notes) > settings.max_notes_length:
        print(
            f"ERROR: Input is {len(notes)} chars; the limit is {settings.max_notes_length}.",
            file=sys.stderr,
        )
        return 1

    result = extract_tasks(notes, args.provider, today=args.today)
    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
