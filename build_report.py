"""
Build the standalone HTML report.

    python build_report.py                          # all reference countries
    python build_report.py -c Italy -c Spain -o out/report.html
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from core.config import CFG
from core.errors import DataFetchError, DatasetValidationError
from domain.reference import DEFAULT_REFERENCE
from use_cases.build_report import build_report_uc
from use_cases.run_pipeline import RunPipelineInput, run_pipeline_uc

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return n


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="COVID-19 country indicators report")
    parser.add_argument("--url", default=CFG.data_url, help="JSON time series endpoint")
    parser.add_argument("--output", "-o", default=CFG.output_path, help="HTML file to write")
    parser.add_argument("--days", "-d", type=positive_int, default=CFG.latest_days, help="Days in the latest-values table")
    parser.add_argument(
        "--country", "-c",
        action="append",
        choices=DEFAULT_REFERENCE.names(),
        help="Restrict to a country (repeatable)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    cfg = dataclasses.replace(CFG, data_url=args.url, output_path=args.output, latest_days=args.days)
    reference = DEFAULT_REFERENCE.subset(args.country) if args.country else DEFAULT_REFERENCE

    try:
        out = run_pipeline_uc(cfg, RunPipelineInput(reference=reference))
    except DataFetchError as e:
        logger.error(f"Fetch failed ({e.url}): {e}")
        return 1
    except DatasetValidationError as e:
        fields = f" (missing: {', '.join(e.missing_fields)})" if e.missing_fields else ""
        logger.error(f"Invalid data: {e}{fields}")
        return 1

    path = build_report_uc(cfg, out.frame, out.meta)
    print(f"Report: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
