"""
Command-line interface for reading recommendations.

Usage:
    # Summary text as argument
    python -m reading_recommender.cli.recommend "A beginner's guide to transformers in NLP"

    # Summary from a file, selected categories, top 5 per category
    python -m reading_recommender.cli.recommend --file summary.txt --categories book,video --limit 5

    # With model and search provider override
    python -m reading_recommender.cli.recommend "..." --model openai/gpt-4o-mini --search-provider serper

Exit codes:
    0 success (individual categories may still be empty, see diagnostics)
    1 fatal pipeline error (extraction failed, misconfiguration)
    2 argument error
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from reading_recommender.config import settings
from reading_recommender.errors import ExtractionFailure, InvalidInputError
from reading_recommender.logging_config import setup_logging
from reading_recommender.models.keywords import ContentCategory, parse_categories
from reading_recommender.recommendations.orchestrator import create_orchestrator


logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_PIPELINE_ERROR = 1
EXIT_USAGE_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reading Recommender CLI - find books, articles and videos related to a summary",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s "A beginner's guide to transformers in NLP"
  %(prog)s --file summary.txt --categories book,article --limit 5
  %(prog)s "..." --model ollama/qwen2.5:7b --output results.json

Categories: book, article, video, website, report, academic
        """
    )

    parser.add_argument(
        "summary",
        nargs="?",
        default=None,
        help="Summary text (omit when using --file)"
    )
    parser.add_argument(
        "--file",
        type=str,
        default=None,
        help="Read the summary from a text file"
    )
    parser.add_argument(
        "--categories",
        "-c",
        type=str,
        default=settings.default_categories,
        help=f"Comma-separated categories (default: {settings.default_categories})"
    )
    parser.add_argument(
        "--limit",
        "-n",
        type=int,
        default=None,
        help="Max results per category"
    )
    parser.add_argument(
        "--model",
        "-m",
        type=str,
        default=None,
        help="Override LLM model (format: provider/model-name, e.g. 'ollama/qwen2.5:7b')"
    )
    parser.add_argument(
        "--search-provider",
        "-s",
        type=str,
        choices=["google", "serper", "brave"],
        default=None,
        help=f"Search provider (default: {settings.search_provider})"
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Write JSON results to this file (default: stdout)"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging"
    )

    return parser


def read_summary(args: argparse.Namespace) -> str:
    """
    Summary text from the positional argument or --file.

    Raises:
        ValueError: If neither or both are given, or the file cannot be read
    """
    if args.file and args.summary:
        raise ValueError("Pass either a summary or --file, not both")
    if args.file:
        path = Path(args.file)
        if not path.is_file():
            raise ValueError(f"File not found: {path}")
        return path.read_text(encoding="utf-8")
    if args.summary is None:
        raise ValueError("A summary text or --file is required")
    return args.summary


def write_output(payload: dict, output_path: Optional[str]) -> None:
    """Print JSON to stdout or write it to a file."""
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if not output_path:
        print(text)
        return

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
    logger.info("output_written", path=str(path))


async def run(
    summary: str,
    categories: List[ContentCategory],
    limit: Optional[int],
    model_override: Optional[str],
    search_provider: Optional[str]
) -> dict:
    orchestrator = create_orchestrator(
        model_override=model_override,
        search_provider=search_provider,
    )
    report = await orchestrator.recommend(summary, categories=categories, limit=limit)

    return {
        "results": {
            category.value: [r.to_dict() for r in results]
            for category, results in report.results.items()
        },
        "keywords": report.keywords.to_llm_dict(),
        "diagnostics": [d.model_dump(mode="json", exclude_none=True) for d in report.diagnostics],
        "pipeline_version": report.pipeline_version.to_repr(),
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(log_level="DEBUG" if args.verbose else None, json_logs=False)

    try:
        summary = read_summary(args)
        if not summary.strip():
            raise ValueError("Summary is empty")
        categories = parse_categories(args.categories)
        if args.limit is not None and args.limit < 1:
            raise ValueError("--limit must be at least 1")
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        payload = asyncio.run(run(
            summary,
            categories=categories,
            limit=args.limit,
            model_override=args.model,
            search_provider=args.search_provider,
        ))
    except InvalidInputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except (ExtractionFailure, ValueError) as e:
        logger.error("recommendation_failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_PIPELINE_ERROR

    write_output(payload, args.output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
