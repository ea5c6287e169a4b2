"""
CLI entry point for the dataset semantic comparator.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from config import DEFAULT_CONFIG_PATH, load_settings
from dataset_loader import load_dataset
from llm_handler import build_client
from matcher import DatasetComparator
from reporting import write_html_summary, write_report_json


class TruncatingFormatter(logging.Formatter):
    """Formatter that truncates log messages to a maximum length."""

    def __init__(self, max_length: int = 200, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_length = max_length

    def format(self, record):
        formatted = super().format(record)
        if len(formatted) > self.max_length:
            formatted = formatted[:self.max_length] + "... (truncated)"
        return formatted


def configure_logging(settings) -> None:
    """
    Configure logging according to settings.

    Args:
        settings: Application settings dataclass.
    """
    log_format = settings.log_format or "%(asctime)s [%(levelname)s] %(message)s"
    datefmt = settings.log_date_format or "%Y-%m-%d %H:%M:%S"

    console_formatter = TruncatingFormatter(max_length=200, fmt=log_format, datefmt=datefmt)
    file_formatter = logging.Formatter(fmt=log_format, datefmt=datefmt)

    handlers = []
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(console_formatter)
    handlers.append(console_handler)

    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(level=log_level, handlers=handlers)

    # Suppress verbose HTTP logging from the model clients
    for name in ("urllib3", "httpcore", "httpx", "openai", "google"):
        logging.getLogger(name).setLevel(logging.WARNING)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Match entries across two datasets by semantic similarity and summarize differences."
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the JSON configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Execute the dataset comparison workflow."""
    args = parse_args(argv)
    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as exc:
        logging.error("Configuration error: %s", exc)
        sys.exit(1)

    if args.debug:
        settings = replace(settings, debug=True)
    configure_logging(settings)

    logging.info("Starting dataset comparison")
    logging.info(
        "Configuration: provider=%s, batch_size=%d, rate_limit_delay=%.2fs",
        settings.provider,
        settings.batch_size,
        settings.rate_limit_delay,
    )

    try:
        logging.info("Loading datasets...")
        dataset_a = load_dataset(settings.dataset_a)
        dataset_b = load_dataset(settings.dataset_b)

        client = build_client(settings)
        comparator = DatasetComparator.from_settings(settings, client)
        report = asyncio.run(comparator.run(dataset_a, dataset_b))

        logging.info("Saving comparison report...")
        write_report_json(report, settings.report_file)
        if settings.summary_file:
            write_html_summary(report, settings.summary_file)

        logging.info("Comparison complete! Report saved to %s", settings.report_file)
        logging.info("Average similarity score: %.4f", report.average_similarity)
    except Exception as exc:
        logging.exception("Fatal error occurred: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
