#!/usr/bin/env python3
"""Interpret a company's financial statements from a JSON file.

Usage:
    python -m scripts.run_analysis data/aapl.json                 # log a summary
    python -m scripts.run_analysis data/aapl.json --json          # full report to stdout
    python -m scripts.run_analysis data/aapl.json --synthesize-ttm
    python -m scripts.run_analysis data/aapl.json --sequential    # no thread pool

The input is a camelCase ``FinancialStatements`` document. Exit codes:
    0 — report produced
    1 — unreadable input or analysis timeout
    2 — statements too thin to analyse
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

# Ensure the project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import ValidationError

from statement_interpreter.config import Settings
from statement_interpreter.errors import AnalysisTimeoutError, InsufficientDataError
from statement_interpreter.facade import InterpreterFacade
from statement_interpreter.schemas.report import AnalysisOptions

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("interpreter")

EXIT_OK = 0
EXIT_BAD_INPUT = 1
EXIT_INSUFFICIENT_DATA = 2


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Interpret financial statements.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("path", type=Path, help="FinancialStatements JSON file")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full report as JSON instead of a summary",
    )
    parser.add_argument(
        "--synthesize-ttm",
        action="store_true",
        help="Build TTM periods from the four latest quarters when absent",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Run analyzers one after another instead of on a thread pool",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = Settings()
    if args.sequential:
        settings = settings.model_copy(update={"parallel_analyzers": False})

    facade = InterpreterFacade(settings=settings)
    try:
        statements = facade.load_statements(args.path)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logger.error("Cannot read %s: %s", args.path, exc)
        return EXIT_BAD_INPUT

    logger.info("=" * 60)
    logger.info("STATEMENT INTERPRETER — %s", statements.symbol)
    logger.info("  Annual periods:    %d", len(statements.income_statements.annual))
    logger.info("  Quarterly periods: %d", len(statements.income_statements.quarterly))
    logger.info("  Parallel:          %s", settings.parallel_analyzers)
    logger.info("=" * 60)

    t0 = time.time()
    options = AnalysisOptions(synthesize_ttm=args.synthesize_ttm)
    try:
        report = facade.analyze(statements, options)
    except InsufficientDataError as exc:
        logger.error("Insufficient data: %s", exc)
        return EXIT_INSUFFICIENT_DATA
    except AnalysisTimeoutError as exc:
        logger.error("%s", exc)
        return EXIT_BAD_INPUT

    if args.json:
        print(json.dumps(report.model_dump(mode="json", by_alias=True), indent=2))
        return EXIT_OK

    health = report.health_score
    logger.info("Health score: %d (%s)", health.overall, health.grade)
    for category in health.categories:
        logger.info("  %-20s %5.1f  (weight %d)", category.name.value, category.score, category.weight)
    logger.info("Red flags (%d):", len(report.red_flags))
    for item in report.red_flags:
        logger.info("  [%s] %s", item.flag.severity.value, item.flag.title)
    logger.info("Green flags (%d):", len(report.green_flags))
    for item in report.green_flags:
        logger.info("  [%s] %s", item.flag.strength.value, item.flag.title)
    logger.info("Recommendations:")
    for rec in report.recommendations:
        logger.info("  (%s) %s", rec.priority.value, rec.title)
    for warning in report.data_quality.warnings:
        logger.warning(warning)

    logger.info("=" * 60)
    logger.info("ANALYSIS COMPLETE in %.2fs", time.time() - t0)
    logger.info("  %s", report.beginner_summary.one_line_summary)
    logger.info("=" * 60)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
