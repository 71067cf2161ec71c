# main.py

"""Entry point for the storefront catalog pipeline CLI."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Coroutine
from typing import Any

from storefront_catalog.cli.runner import cli_fetch, run_health_check
from storefront_catalog.config.logging_config import setup_logging
from storefront_catalog.config.settings import Settings

logger = logging.getLogger("storefront_catalog.main")


def _arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storefront-catalog",
        description=(
            "Fetch the product catalog of "
            f"{Settings.STOREFRONT_BASE_URL}, falling back through "
            "JSON, sitemap and listing-page strategies."
        ),
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="output_format",
        choices=["json", "table"],
        default="json",
        help="print the catalog as JSON (default) or a table",
    )
    parser.add_argument(
        "-p",
        "--parser",
        dest="parser_name",
        choices=Settings.AVAILABLE_PARSERS,
        help=f"markup parser to use (default: {Settings.MARKUP_PARSER})",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        help="only probe the storefront endpoints",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, run the chosen command, exit with its code."""
    args = _arg_parser().parse_args(argv)
    log_file = setup_logging()
    logger.info("Run started, logging to %s", log_file)

    command: Coroutine[Any, Any, int] = (
        run_health_check()
        if args.health
        else cli_fetch(args.output_format, args.parser_name)
    )
    sys.exit(asyncio.run(command))


if __name__ == "__main__":
    main()
