"""
Run the game feed pipeline from the command line.
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from gamefeed.config import get_fetch_settings, get_output_settings, get_source_settings
from gamefeed.ids import load_universe_ids
from gamefeed.logging_utils import configure_logging
from gamefeed.scheduler import build_scheduler
from gamefeed.services.pipeline import build_pipeline
from gamefeed.storage.json_sink import JsonFileSink

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build the sorted game feed JSON file.")
    parser.add_argument(
        "--ids-file",
        dest="ids_file",
        default=None,
        help="JSON array or text file of universe ids. Defaults to the bundled list.",
    )
    parser.add_argument(
        "--output",
        dest="output",
        default=None,
        help="Output JSON path. Defaults to GAMEFEED_OUTPUT_PATH or public/games.json.",
    )
    parser.add_argument(
        "--batch-size",
        dest="batch_size",
        type=int,
        default=None,
        help="Universe ids per request batch.",
    )
    parser.add_argument(
        "--every-minutes",
        dest="every_minutes",
        type=float,
        default=None,
        help="Keep running and refresh the feed on this interval.",
    )
    return parser


def run_once(
    *,
    ids_file: str | None = None,
    output: str | None = None,
    batch_size: int | None = None,
) -> dict[str, Any]:
    """
    Run one full feed build and return a JSON-serialisable summary.
    """

    fetch_settings = get_fetch_settings()
    if batch_size is not None:
        fetch_settings = replace(fetch_settings, batch_size=batch_size)
    output_settings = get_output_settings()

    ids = load_universe_ids(ids_file or output_settings.ids_path)
    pipeline = build_pipeline(
        fetch_settings=fetch_settings,
        source_settings=get_source_settings(),
    )
    result = pipeline.execute(ids)
    written = JsonFileSink(output or output_settings.output_path).write(result.records)

    return {
        "ids": len(ids),
        "batches": result.batches_total,
        "batches_failed": result.batches_failed,
        "failed_ids": result.failed_ids,
        "records": len(result.records),
        "output": str(written),
    }


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging()

    if args.every_minutes is not None:
        scheduler = build_scheduler(
            lambda: run_once(
                ids_file=args.ids_file,
                output=args.output,
                batch_size=args.batch_size,
            ),
            interval_minutes=args.every_minutes,
        )
        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Scheduler stopped")
        return 0

    summary = run_once(
        ids_file=args.ids_file,
        output=args.output,
        batch_size=args.batch_size,
    )
    print(json.dumps(summary, indent=2))
    if summary["batches"] and summary["batches_failed"] == summary["batches"]:
        return 1
    return 0
