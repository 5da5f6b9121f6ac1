import unittest
from datetime import date

from invord.errors import LineParseError
from invord.orders import (
    calculate_po_urgency,
    extract_report_date,
    parse_po_line,
    parse_report_date_token,
    parse_special_order_line,
)
from invord.schemas import SpecialOrderStatus, VendorContext

FRITO_LAY = VendorContext(id="00001740", name="FRITO LAY")
REPORT_DATE = date(2025, 12, 29)


class TestParsePOLine(unittest.TestCase):
    def test_confirmed_po_inside_window_is_not_urgent(self) -> None:
        po = parse_po_line("60649 01/02/26 955 Conf:EDI Costs Yes 01/02/26 06:00 12/23/25", FRITO_LAY, REPORT_DATE)
        self.assertEqual(po.po_number, "60649")
        self.assertEqual(po.due_date, "01/02/26")
        self.assertEqual(po.total_cases, 955)
        self.assertEqual(po.status, "Conf:EDI")
        self.assertTrue(po.edi)
        self.assertEqual(po.appointment, "01/02/26 06:00")
        self.assertEqual(po.entered, "12/23/25")
        self.assertEqual(po.days_until_due, 4)
        self.assertFalse(po.is_urgent)
        self.assertEqual(po.urgent_reasons, [])
        self.assertEqual(po.vendor_id, "00001740")

    def test_unconfirmed_po_without_appointment(self) -> None:
        po = parse_po_line("60650 12/31/25 120 Conf:Recpt/Qty/Costs. 12/20/25", FRITO_LAY, REPORT_DATE)
        self.assertIsNone(po.edi)
        self.assertIsNone(po.appointment)
        self.assertEqual(po.entered, "12/20/25")
        self.assertEqual(po.days_until_due, 2)
        self.assertTrue(po.is_urgent)
        self.assertEqual(po.urgent_reasons, ["No EDI confirmation", "No appointment"])

    def test_explicit_no_edi(self) -> None:
        po = parse_po_line("60651 01/01/26 10 Pending No 12/30/25 08:00", FRITO_LAY, REPORT_DATE)
        self.assertIs(po.edi, False)
        self.assertEqual(po.appointment, "12/30/25 08:00")
        self.assertEqual(po.urgent_reasons, ["No EDI confirmation"])

    def test_far_out_po_is_never_urgent(self) -> None:
        po = parse_po_line("60700 01/15/26 40 Pending 01/08/26", FRITO_LAY, REPORT_DATE)
        self.assertEqual(po.status, "Pending")
        self.assertEqual(po.days_until_due, 17)
        self.assertFalse(po.is_urgent)

    def test_overdue_po(self) -> None:
        po = parse_po_line("60600 12/20/25 8 Received 12/01/25", FRITO_LAY, REPORT_DATE)
        self.assertEqual(po.days_until_due, -9)
        self.assertTrue(po.is_urgent)

    def test_pickup(self) -> None:
        po = parse_po_line("60652 01/10/26 60 Pending Pick up 01/02/26", FRITO_LAY, REPORT_DATE)
        self.assertTrue(po.pick_up)
        po = parse_po_line("60653 01/10/26 60 Pending 01/02/26", FRITO_LAY, REPORT_DATE)
        self.assertIsNone(po.pick_up)

    def test_unknown_status_uses_first_token(self) -> None:
        po = parse_po_line("60654 01/10/26 60 Dock 07:30", FRITO_LAY, REPORT_DATE)
        self.assertEqual(po.status, "Dock")

    def test_bad_lines_raise(self) -> None:
        for line in (
            "60649 01/02/26",
            "6064 01/02/26 955 Pending",
            "60649 1/2/26 955 Pending",
            "60649 01/02/26 many Pending",
        ):
            with self.assertRaises(LineParseError, msg=line):
                parse_po_line(line, FRITO_LAY, REPORT_DATE)

    def test_impossible_due_date_raises(self) -> None:
        with self.assertRaises(ValueError):
            parse_po_line("60649 13/45/26 955 Pending 12/23/25", FRITO_LAY, REPORT_DATE)


class TestPOUrgency(unittest.TestCase):
    def test_every_combination(self) -> None:
        for due in ("12/20/25", "12/29/25", "01/03/26", "01/04/26", "02/01/26"):
            for edi in (True, False, None):
                for appointment in ("01/02/26 06:00", None):
                    days, urgent, reasons = calculate_po_urgency(due, edi, appointment, REPORT_DATE)
                    self.assertEqual(urgent, bool(reasons))
                    if days > 5:
                        self.assertFalse(urgent)
                    else:
                        self.assertEqual("No EDI confirmation" in reasons, edi is not True)
                        self.assertEqual("No appointment" in reasons, appointment is None)

    def test_window_edge(self) -> None:
        self.assertEqual(calculate_po_urgency("01/03/26", None, None, REPORT_DATE)[0], 5)
        self.assertTrue(calculate_po_urgency("01/03/26", None, None, REPORT_DATE)[1])
        self.assertFalse(calculate_po_urgency("01/04/26", None, None, REPORT_DATE)[1])


class TestParseSpecialOrderLine(unittest.TestCase):
    def test_doq_order(self) -> None:
        so = parse_special_order_line(
            "TF164 CHIP POTATO JALAPENO 1415 BILL & CAROL'S 12/11/25 12/22/25 01/06/26 60468 1 0 *DOQ* Bill H",
            FRITO_LAY,
        )
        self.assertEqual(so.product_number, "TF164")
        self.assertEqual(so.description, "CHIP POTATO JALAPENO")
        self.assertEqual(so.customer_number, "1415")
        self.assertEqual(so.customer_name, "BILL & CAROL'S")
        self.assertEqual(so.date_entered, "12/11/25")
        self.assertEqual(so.date_doq, "12/22/25")
        self.assertEqual(so.date_due, "01/06/26")
        self.assertEqual(so.po_number, "60468")
        self.assertEqual(so.qty_ordered, 1)
        self.assertEqual(so.on_hand, 0)
        self.assertIs(so.status, SpecialOrderStatus.DOQ)
        self.assertEqual(so.vendor_name, "FRITO LAY")

    def test_ready_order(self) -> None:
        so = parse_special_order_line(
            "RK172 ROTH CHEESE GRUYERE 2210 CAFE LUNA 12/01/25 12/15/25 60412 2 2 Ready",
            FRITO_LAY,
        )
        self.assertIs(so.status, SpecialOrderStatus.READY)
        self.assertEqual(so.customer_name, "CAFE LUNA")
        self.assertIsNone(so.date_due)
        self.assertEqual(so.qty_ordered, 2)
        self.assertEqual(so.on_hand, 2)

    def test_plain_order_without_customer(self) -> None:
        so = parse_special_order_line("TF200 CHIP KETTLE SALT 12/20/25 3 Order", FRITO_LAY)
        self.assertIs(so.status, SpecialOrderStatus.ORDER)
        self.assertEqual(so.customer_number, "")
        self.assertEqual(so.description, "CHIP KETTLE SALT")
        self.assertIsNone(so.po_number)
        self.assertEqual(so.qty_ordered, 3)
        self.assertEqual(so.on_hand, 0)

    def test_bad_lines_raise(self) -> None:
        with self.assertRaises(LineParseError):
            parse_special_order_line("TF164 CHIP 12/11/25", FRITO_LAY)
        with self.assertRaises(LineParseError):
            parse_special_order_line("TF164 CHIP POTATO JALAPENO BILL CAROL", FRITO_LAY)


class TestReportDate(unittest.TestCase):
    def test_run_date_header(self) -> None:
        self.assertEqual(extract_report_date("RUN DATE 12/29/25   PAGE: 27"), date(2025, 12, 29))
        self.assertEqual(extract_report_date("header\nRUN DATE: 01/05/26"), date(2026, 1, 5))

    def test_missing_or_invalid(self) -> None:
        self.assertIsNone(extract_report_date("no header here"))
        self.assertIsNone(extract_report_date("RUN DATE 13/45/25"))

    def test_date_token(self) -> None:
        self.assertEqual(parse_report_date_token("01/02/26"), date(2026, 1, 2))
        with self.assertRaises(ValueError):
            parse_report_date_token("2026-01-02")


if __name__ == "__main__":
    unittest.main()
