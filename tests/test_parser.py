import unittest
from datetime import date
from pathlib import Path

from invord.errors import InvalidReportError
from invord.parser import is_valid_extraction, parse_lines, parse_report_text
from invord.schemas import Confidence

DATA_DIR = Path(__file__).parent / "data"
REPORT_DATE = date(2025, 12, 29)

VENDOR = "Vendor: 00001740 FRITO LAY * Broker: Min Order: 1000"
ITEM = "54406 CS 72/1 OZ DORITO CHIP TORTILLA NACHO CHSE 665 39 29 4 1 24 46 48 9 28.79 31.05 DL3400 4.4"
PO = "60649 01/02/26 955 Conf:EDI Costs Yes 01/02/26 06:00 12/23/25"


class TestSampleReport(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.text = (DATA_DIR / "sample_report.txt").read_text(encoding="utf-8")
        cls.response = parse_report_text(cls.text)

    def test_report_date_from_header(self) -> None:
        self.assertEqual(self.response.report_date, REPORT_DATE)

    def test_records(self) -> None:
        self.assertEqual(
            [item.product_number for item in self.response.items],
            ["26228", "54406", "75878", "ABC46"],
        )
        self.assertEqual(
            [po.po_number for po in self.response.purchase_orders],
            ["60649", "60650", "60700"],
        )
        self.assertEqual([so.product_number for so in self.response.special_orders], ["TF164"])
        self.assertEqual(self.response.parse_errors, [])

    def test_vendor_attribution(self) -> None:
        vendors = {item.product_number: item.vendor_name for item in self.response.items}
        self.assertEqual(vendors["54406"], "FRITO LAY")
        self.assertEqual(vendors["ABC46"], "HEARTISAN FOODS")

        po_vendors = {po.po_number: po.vendor_id for po in self.response.purchase_orders}
        self.assertEqual(po_vendors["60649"], "00001740")
        self.assertEqual(po_vendors["60700"], "10000867")

    def test_duplicate_po_keeps_first(self) -> None:
        matches = [po for po in self.response.purchase_orders if po.po_number == "60649"]
        self.assertEqual(len(matches), 1)
        self.assertEqual(matches[0].vendor_name, "FRITO LAY")

    def test_item_stats(self) -> None:
        stats = self.response.stats
        self.assertEqual(stats.total_items, 4)
        self.assertEqual(stats.high_confidence_count, 3)
        self.assertEqual(stats.medium_confidence_count, 0)
        self.assertEqual(stats.low_confidence_count, 1)
        self.assertEqual(stats.attention_count, 1)
        self.assertEqual(stats.critical_count, 1)
        self.assertEqual(stats.watch_list_count, 0)
        self.assertEqual(stats.needs_review_count, 1)
        self.assertEqual(stats.vendor_count, 2)
        self.assertEqual(stats.special_order_count, 1)

    def test_po_stats(self) -> None:
        po_stats = self.response.po_stats
        self.assertEqual(po_stats.total_pos, 3)
        self.assertEqual(po_stats.total_cases, 1115)
        self.assertEqual(po_stats.vendors_with_pos, 2)
        self.assertEqual(po_stats.this_week_arrivals, 2)
        self.assertEqual(po_stats.urgent_po_count, 1)
        self.assertEqual(po_stats.urgent_cases, 120)
        self.assertEqual(po_stats.missing_edi_count, 1)
        self.assertEqual(po_stats.missing_appointment_count, 1)
        self.assertEqual(po_stats.overdue_po_count, 0)
        self.assertEqual(po_stats.doq_count, 1)

    def test_high_confidence_always_has_days_of_supply(self) -> None:
        for item in self.response.items:
            if item.confidence is Confidence.HIGH:
                self.assertIsNotNone(item.days_of_supply)

    def test_parsing_is_repeatable(self) -> None:
        again = parse_report_text(self.text)
        self.assertEqual(again.model_dump(), self.response.model_dump())

    def test_legacy_strategy(self) -> None:
        response = parse_report_text(self.text, tail_strategy="legacy")
        self.assertEqual(len(response.items), 4)
        self.assertTrue(all(item.average_sales is None for item in response.items))


class TestParseLines(unittest.TestCase):
    def test_item_before_vendor_is_an_error(self) -> None:
        response = parse_lines([ITEM, VENDOR, ITEM], REPORT_DATE)
        self.assertEqual(response.parse_errors, ["Line 1: Item found before vendor declaration"])
        self.assertEqual(len(response.items), 1)

    def test_po_before_vendor_is_an_error(self) -> None:
        response = parse_lines([PO], REPORT_DATE)
        self.assertEqual(response.parse_errors, ["Line 1: Purchase order found before vendor declaration"])
        self.assertEqual(response.purchase_orders, [])

    def test_bad_line_is_reported_and_parsing_continues(self) -> None:
        response = parse_lines(
            [VENDOR, "60649 13/45/26 955 Pending 12/23/25", ITEM],
            REPORT_DATE,
        )
        self.assertEqual(len(response.parse_errors), 1)
        self.assertTrue(response.parse_errors[0].startswith("Line 2: Parse error - "))
        self.assertEqual(len(response.items), 1)

    def test_special_order_section_closes_on_po_header(self) -> None:
        so_line = "TF164 CHIP POTATO JALAPENO 1415 BILL & CAROL'S 12/11/25 12/22/25 01/06/26 60468 1 0 *DOQ* Bill H"
        response = parse_lines(
            [
                VENDOR,
                "Special Order summary for this vendor",
                so_line,
                "Open P.O. Summary for Vendor 00001740",
                so_line,
            ],
            REPORT_DATE,
        )
        self.assertEqual(len(response.special_orders), 1)

    def test_short_dated_line_in_section_is_skipped(self) -> None:
        so_line = "TF164 CHIP POTATO JALAPENO 1415 BILL & CAROL'S 12/11/25 12/22/25 01/06/26 60468 1 0 *DOQ* Bill H"
        response = parse_lines(
            [
                VENDOR,
                "Special Order summary for this vendor",
                so_line,
                "BILL H 12/22/25",
                "Vnd 00001740 SubTot Cases: 1075",
            ],
            REPORT_DATE,
        )
        self.assertEqual(response.parse_errors, [])
        self.assertEqual(len(response.special_orders), 1)

    def test_vendor_header_resets_section(self) -> None:
        so_line = "TF164 CHIP POTATO JALAPENO 1415 BILL & CAROL'S 12/11/25 12/22/25 01/06/26 60468 1 0 *DOQ* Bill H"
        response = parse_lines(
            [VENDOR, "Special Order summary for this vendor", VENDOR, so_line],
            REPORT_DATE,
        )
        self.assertEqual(response.special_orders, [])

    def test_unknown_tail_strategy(self) -> None:
        with self.assertRaises(ValueError):
            parse_lines([VENDOR, ITEM], REPORT_DATE, tail_strategy="columnar")

    def test_empty_input(self) -> None:
        response = parse_lines([], REPORT_DATE)
        self.assertEqual(response.items, [])
        self.assertEqual(response.stats.total_items, 0)
        self.assertEqual(response.po_stats.total_pos, 0)


class TestReportText(unittest.TestCase):
    def test_rejects_short_text(self) -> None:
        with self.assertRaises(InvalidReportError):
            parse_report_text("Vendor: 00001740 FRITO LAY")

    def test_rejects_text_without_markers(self) -> None:
        self.assertFalse(is_valid_extraction("lorem ipsum dolor sit amet " * 10))
        with self.assertRaises(InvalidReportError):
            parse_report_text("lorem ipsum dolor sit amet " * 10)

    def test_caller_date_wins(self) -> None:
        text = "\n".join(["RUN DATE 12/29/25", VENDOR, PO, ITEM])
        response = parse_report_text(text, report_date=date(2026, 1, 1))
        self.assertEqual(response.report_date, date(2026, 1, 1))
        self.assertEqual(response.purchase_orders[0].days_until_due, 1)

    def test_falls_back_to_today(self) -> None:
        text = "\n".join([VENDOR, PO, ITEM])
        response = parse_report_text(text)
        self.assertEqual(response.report_date, date.today())


if __name__ == "__main__":
    unittest.main()
