#!/usr/bin/env python3
"""
CLI Entry Point — generate index HTML from an options file
==========================================================
Usage:
    python -m index_builder --file index.yaml
    python -m index_builder --file index.json --debug-only -v

    # or with the options path in .env / the environment:
    INDEX_BUILDER_OPTIONS=index.yaml index-builder

Exit status is 1 when the options file cannot be loaded, when a vendor
manifest is unreadable, when the debug loader fails, or when any template
failed to build.
"""

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from .errors import DebugLoaderError, FatalBuildError
from .options import ENV_OPTIONS_FILE, apply_env_overrides, load_options_file
from .orchestrator import build_index

logger = logging.getLogger("index_builder.cli")


def setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
        force=True,  # re-apply even if already configured
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate debug and compiled index HTML files from templates"
    )
    parser.add_argument(
        "--file", "-f",
        type=str,
        default="",
        help=f"Options file (.json, .yaml, .yml). Default: ${ENV_OPTIONS_FILE}",
    )
    parser.add_argument(
        "--debug-only", "-d",
        action="store_true",
        default=False,
        help="Only write debug indexes; skip the compiled indexes",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def main(argv=None) -> int:
    load_dotenv(override=True)  # .env values win over empty system env vars

    args = _parser().parse_args(argv)
    setup_logging(args.verbose)

    options_file = args.file or os.environ.get(ENV_OPTIONS_FILE, "")
    if not options_file:
        logger.error("No options file given (use --file or set %s)", ENV_OPTIONS_FILE)
        return 1

    try:
        options = apply_env_overrides(load_options_file(options_file))
    except Exception as exc:  # noqa: BLE001 — any load failure means a broken build setup
        logger.error("Failed loading index file %s: %s", options_file, exc)
        return 1

    try:
        report = asyncio.run(build_index(options, debug_only=args.debug_only))
    except FatalBuildError as exc:
        logger.error("%s", exc)
        return 1
    except DebugLoaderError as exc:
        logger.error("%s", exc)
        return 1

    if not report.ok:
        for position, error in report.failures.items():
            logger.error("  %s (#%d): %s", report.records[position].template_id, position, error)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
