"""
Command line interface for Storyflow.

Subcommands:

* ``evaluate`` – Score a career story read from a file or passed inline
  and print a report (or JSON with ``--json``).
* ``schema`` – Print the strict JSON schema sent to the LLM provider.

Credentials are read from the environment; a ``.env`` file in the
working directory is loaded first when present.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import List

from dotenv import load_dotenv

from .evaluate.llm_judge import StoryEvaluator
from .evaluate.report import format_score_report
from .evaluate.session import StorySession, validate_story_text
from .rubric.schema import story_score_schema

logger = logging.getLogger("storyflow.cli")

EXIT_OK = 0
EXIT_EVALUATION_FAILED = 1
EXIT_INVALID_STORY = 2


def _read_story(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    with open(args.file, "r", encoding="utf-8") as f:
        return f.read()


def cmd_evaluate(args: argparse.Namespace) -> int:
    """Evaluate a story and print the result."""
    session = StorySession(StoryEvaluator(model_name=args.model))
    try:
        session.story_text = _read_story(args)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Could not read story file {args.file}: {exc}", file=sys.stderr)
        return EXIT_INVALID_STORY
    problem = validate_story_text(session.story_text)
    if problem is not None:
        print(problem, file=sys.stderr)
        return EXIT_INVALID_STORY

    score = asyncio.run(session.score())
    if score is None:
        if session.last_error is not None:
            logger.debug("Evaluation failed with %s", session.last_error.kind)
        print(session.error_message, file=sys.stderr)
        return EXIT_EVALUATION_FAILED

    if args.json:
        print(json.dumps(score.to_summary(), indent=2))
    else:
        print(format_score_report(score))
    return EXIT_OK


def cmd_schema(args: argparse.Namespace) -> int:
    """Print the story score JSON schema."""
    print(json.dumps(story_score_schema(), indent=2))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="storyflow", description="Career story scoring CLI")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    evaluate_cmd = subparsers.add_parser("evaluate", help="Score a career story")
    source = evaluate_cmd.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="Path to a UTF-8 text file containing the story")
    source.add_argument("--text", help="Story text passed inline")
    evaluate_cmd.add_argument("--model", help="Model name (default: $OPENAI_MODEL or gpt-4o)")
    evaluate_cmd.add_argument("--json", action="store_true", help="Print the score as JSON")
    evaluate_cmd.set_defaults(func=cmd_evaluate)

    schema_cmd = subparsers.add_parser("schema", help="Print the response JSON schema")
    schema_cmd.set_defaults(func=cmd_schema)
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    load_dotenv()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
