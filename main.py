import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from invord import settings
from invord.logger import setup_logger
from invord.pipelines.report import ReportPipeline


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Parse an Inventory Order Report PDF.")
    parser.add_argument(
        "--file",
        type=Path,
        help=f"Report PDF or extracted .txt (default: latest '{settings.REPORT_FILENAME_PREFIX}*' in {settings.INPUT_DIR})",
    )
    parser.add_argument(
        "--report-date",
        type=date.fromisoformat,
        help="Override the RUN DATE found in the report (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--tail-strategy",
        choices=["tiered", "legacy"],
        help=f"Item tail recovery mode (default: {settings.TAIL_STRATEGY})",
    )
    parser.add_argument("--test", action="store_true", help="Skip the webhook post")
    parser.add_argument("--debug", action="store_true", help="Log every line decision")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logger(log_level=logging.DEBUG if args.debug else None)

    pipeline = ReportPipeline(
        report_path=args.file,
        report_date=args.report_date,
        tail_strategy=args.tail_strategy,
        test_mode=args.test,
    )
    result = pipeline.run()
    return 0 if result is not None else 1


if __name__ == "__main__":
    sys.exit(main())
