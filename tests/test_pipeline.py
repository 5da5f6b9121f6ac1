import shutil
import tempfile
import unittest
from datetime import date
from pathlib import Path
from unittest.mock import patch

import main
from invord import settings
from invord.pipelines.report import ReportPipeline

DATA_DIR = Path(__file__).parent / "data"


class TestReportPipeline(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.report = self.tmp / "INVORD_20251229.txt"
        shutil.copy(DATA_DIR / "sample_report.txt", self.report)

        patches = [
            patch.object(settings, "INPUT_DIR", self.tmp),
            patch.object(settings, "OUTPUT_DIR", self.tmp / "output"),
            patch.object(settings, "SAVE_JSON_OUTPUT", True),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)
        self.addCleanup(self._tmp.cleanup)

    def test_run_finds_latest_report(self) -> None:
        with patch("invord.data_handler.post_to_webhook") as post:
            response = ReportPipeline(test_mode=True).run()
            post.assert_not_called()

        self.assertIsNotNone(response)
        self.assertEqual(response.stats.total_items, 4)
        self.assertTrue((self.tmp / "output" / "invord_parse_2025-12-29.json").exists())

    def test_report_date_override(self) -> None:
        response = ReportPipeline(
            report_path=self.report, report_date=date(2026, 1, 1), test_mode=True
        ).run()
        self.assertEqual(response.report_date, date(2026, 1, 1))

    def test_posts_outside_test_mode(self) -> None:
        with patch("invord.data_handler.post_to_webhook") as post:
            ReportPipeline(report_path=self.report).run()
            post.assert_called_once()

    def test_invalid_report_returns_none(self) -> None:
        bad = self.tmp / "INVORD_bad.txt"
        bad.write_text("not a report")
        self.assertIsNone(ReportPipeline(report_path=bad, test_mode=True).run())

    def test_no_report_found(self) -> None:
        self.report.unlink()
        self.assertIsNone(ReportPipeline(test_mode=True).run())


class TestMain(unittest.TestCase):
    def test_exit_codes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            report = Path(tmp) / "INVORD_20251229.txt"
            shutil.copy(DATA_DIR / "sample_report.txt", report)
            with patch.object(settings, "OUTPUT_DIR", Path(tmp) / "output"), patch(
                "main.setup_logger"
            ):
                self.assertEqual(main.main(["--file", str(report), "--test"]), 0)
                self.assertEqual(
                    main.main(["--file", str(Path(tmp) / "missing.txt"), "--test"]), 1
                )

    def test_tail_strategy_choice(self) -> None:
        args = main.parse_args(["--tail-strategy", "legacy", "--report-date", "2025-12-29"])
        self.assertEqual(args.tail_strategy, "legacy")
        self.assertEqual(args.report_date, date(2025, 12, 29))
        with self.assertRaises(SystemExit):
            main.parse_args(["--tail-strategy", "columnar"])


if __name__ == "__main__":
    unittest.main()
