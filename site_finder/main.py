"""Command-line entry point for Company Site Finder.

Usage:
    company-site-finder --name "Acme Corp" [--address "..."] [--description "..."]

Prints the best match as JSON, or a plain message when nothing suitable was
found. Configuration comes from the environment (and a ``.env`` file).
"""

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from site_finder.config import LOG_LEVELS, AppConfig, ConfigurationError, load_config
from site_finder.models import CompanyInfo
from site_finder.services.website_finder import WebsiteFinder

logger = logging.getLogger(__name__)

NO_RESULT_MESSAGE = "No suitable website found."
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def _non_blank(value: str) -> str:
    if not value.strip():
        raise argparse.ArgumentTypeError("must not be empty")
    return value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="company-site-finder",
        description="Find the official website of a company.",
    )
    parser.add_argument("--name", required=True, type=_non_blank, help="Company name")
    parser.add_argument("--address", help="Company address (optional)")
    parser.add_argument("--description", help="Company description (optional)")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        help="Override LOG_LEVEL from the environment",
    )
    return parser


def setup_logging(level: str) -> None:
    """Configure root logging; log records go to stderr, results to stdout."""
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT, stream=sys.stderr)


async def run(company: CompanyInfo, config: AppConfig) -> int:
    """Run one lookup and print the outcome. Returns the exit status."""
    async with WebsiteFinder.from_config(config) as finder:
        best = await finder.find_best_url(company)

    if best is None:
        print(NO_RESULT_MESSAGE)
    else:
        print(json.dumps(best.model_dump(), indent=2, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        0 on success (including "no match"), 1 on configuration errors.
        Usage errors exit with status 2 from argparse.
    """
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
    except ConfigurationError as e:
        setup_logging(args.log_level or "INFO")
        logger.error(f"Configuration error: {e}")
        return 1

    setup_logging(args.log_level or config.log_level)

    company = CompanyInfo(
        name=args.name,
        address=args.address or None,
        description=args.description or None,
    )
    return asyncio.run(run(company, config))


if __name__ == "__main__":
    sys.exit(main())
