import logging
from datetime import date
from pathlib import Path
from typing import Optional

from invord import data_handler, settings, utils
from invord.errors import InvalidReportError
from invord.extraction import read_report
from invord.parser import parse_report_text
from invord.pipeline import DataPipeline
from invord.schemas import ParseResponse

logger = logging.getLogger(__name__)


class ReportPipeline(DataPipeline):
    def __init__(
        self,
        report_path: Optional[Path] = None,
        report_date: Optional[date] = None,
        tail_strategy: Optional[str] = None,
        test_mode: bool = False,
    ):
        super().__init__("inventory order", test_mode=test_mode)
        self.report_path = report_path
        self.report_date = report_date
        self.tail_strategy = tail_strategy

    def extract(self) -> Optional[str]:
        logger.info("--- Locating Inventory Order Report ---")

        path = self.report_path or utils.find_latest_report(
            settings.INPUT_DIR, settings.REPORT_FILENAME_PREFIX
        )
        if path is None:
            logger.error(
                f"  > ERROR: No report found in {settings.INPUT_DIR} "
                f"with prefix '{settings.REPORT_FILENAME_PREFIX}'."
            )
            return None

        logger.info(f"  > Found: {path.name}")
        try:
            text = read_report(path)
        except (InvalidReportError, OSError) as e:
            logger.error(f"  > ERROR: Could not read {path.name}: {e}")
            return None

        logger.info(f"  > Extracted {len(text)} characters")
        return text

    def transform(self, text: str) -> Optional[ParseResponse]:
        logger.info("\n--- Parsing Report Lines ---")
        try:
            response = parse_report_text(text, self.report_date, self.tail_strategy)
        except InvalidReportError as e:
            logger.error(f"❌ Report rejected: {e}")
            return None

        stats = response.stats
        logger.info(f"Report date: {response.report_date.isoformat()}")
        logger.info(f"Parsed {stats.total_items} items from {stats.vendor_count} vendors")
        logger.info(f"  - High confidence: {stats.high_confidence_count}")
        logger.info(f"  - Attention (≤{settings.ATTENTION_DAYS_SUPPLY} days): {stats.attention_count}")
        logger.info(f"  - Critical (≤{settings.CRITICAL_DAYS_SUPPLY} days): {stats.critical_count}")
        logger.info(f"  - Needs review: {stats.needs_review_count}")

        po_stats = response.po_stats
        logger.info(f"Open POs: {po_stats.total_pos} ({po_stats.total_cases} cases)")
        if po_stats.urgent_po_count:
            logger.warning(
                f"  - ⚠️ Urgent POs: {po_stats.urgent_po_count} "
                f"({po_stats.urgent_cases} cases at risk)"
            )

        if response.parse_errors:
            logger.warning(f"  - Parse errors: {len(response.parse_errors)}")
            for error in response.parse_errors:
                logger.debug(f"    {error}")

        return response

    def load(self, response: ParseResponse):
        data_handler.save_outputs(response)

        if not self.test_mode:
            data_handler.post_to_webhook(response)
        else:
            logger.info("🧪 Test Mode: Skipping webhook post.")
