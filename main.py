"""
Max Pain - Option Chain Max Pain Calculator

Entry point: loads an option chain workbook, calculates the max pain
strike and prints the result as JSON.

Usage:
    python main.py data/chain.xlsx
    python main.py data/chain.xlsx --low 3200 --high 3800 --output result.json
"""

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from analysis.max_pain import DisplayBand
from config import get_config
from core.exceptions import ConfigurationError, MaxPainError
from core.logger import log_with_context, set_correlation_id, setup_logger
from ingest.excel_loader import calculate_max_pain_from_excel


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Calculate max pain from an option chain workbook")
    parser.add_argument("path", type=Path, help="Workbook with 'call' and 'put' sheets")
    parser.add_argument("--low", type=float, default=None, help="Display band lower strike")
    parser.add_argument("--high", type=float, default=None, help="Display band upper strike")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL)")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    parser.add_argument("--output", type=Path, default=None, help="Write JSON result to file")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # 1. Configuration and logging
    try:
        config = get_config()
    except ConfigurationError as e:
        logger.error(f"Config error: {e}")
        return 1

    setup_logger(
        level=args.log_level or config.log.level,
        log_dir=config.log.log_dir,
        rotation=config.log.rotation,
        json_output=args.json_logs or config.log.json_output,
    )
    set_correlation_id(args.path.name)

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Config error: {error}")
        return 1

    # 2. Calculate
    try:
        band = DisplayBand(
            low=args.low if args.low is not None else config.display_band.low,
            high=args.high if args.high is not None else config.display_band.high,
        )
        result = calculate_max_pain_from_excel(args.path, display_band=band)
    except MaxPainError as e:
        logger.error(f"Max pain calculation failed: {e}")
        return 1

    # 3. Output
    payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
        log_with_context("info", f"Result written to {args.output}")
    else:
        print(payload)

    return 0


if __name__ == "__main__":
    sys.exit(main())
