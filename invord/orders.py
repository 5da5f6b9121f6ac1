"""
Purchase-order and special-order line recovery.

PO example:  "60649 01/02/26 955 Conf:EDI Costs Yes 01/02/26 06:00 12/23/25"
S/O example: "TF164 CHIP POTATO JALAPENO 1415 BILL & CAROL'S 12/11/25 12/22/25 01/06/26 60468 1 0 *DOQ* Bill H"
"""

import re
from datetime import date
from typing import Optional

from . import settings
from .errors import LineParseError
from .schemas import PurchaseOrder, SpecialOrder, SpecialOrderStatus, VendorContext
from .tokens import (
    is_customer_number,
    is_date,
    is_integer,
    is_po_number,
    is_product_number,
    is_time,
    tokenize,
)

STATUS_PATTERN = re.compile(r"^(Conf:\S+|Pending|Received)")
EDI_AFFIRMATIVE = re.compile(r"\bYes\b", re.IGNORECASE)
EDI_NEGATIVE = re.compile(r"\bNo\b", re.IGNORECASE)
PICKUP_PATTERN = re.compile(r"pick\s?up", re.IGNORECASE)
READY_PATTERN = re.compile(r"\bReady\b", re.IGNORECASE)
DOQ_MARKER = "*DOQ*"

MIN_PO_TOKENS = 4
MAX_QUANTITY_DIGITS = 3


def parse_report_date_token(date_str: str) -> date:
    """MM/DD/YY, two-digit years are 20YY."""
    if not is_date(date_str):
        raise ValueError(f"Expected MM/DD/YY date, got: {date_str}")
    month, day, year = (int(part) for part in date_str.split("/"))
    return date(2000 + year, month, day)


def calculate_days_until_due(due_date: str, report_date: date) -> int:
    return (parse_report_date_token(due_date) - report_date).days


def calculate_po_urgency(
    due_date: str,
    edi: Optional[bool],
    appointment: Optional[str],
    report_date: date,
) -> tuple[int, bool, list[str]]:
    """
    Returns (days_until_due, is_urgent, urgent_reasons).
    Only POs inside the urgency window (or overdue) can be urgent; further out
    they are never flagged, whatever their EDI / appointment state.
    """
    days_until_due = calculate_days_until_due(due_date, report_date)
    urgent_reasons = []

    if days_until_due <= settings.URGENT_WINDOW_DAYS:
        if edi is not True:
            urgent_reasons.append(settings.NO_EDI_REASON)
        if not appointment:
            urgent_reasons.append(settings.NO_APPOINTMENT_REASON)

    return days_until_due, bool(urgent_reasons), urgent_reasons


def _edi_status(status: str, rest_of_line: str) -> Optional[bool]:
    if "edi" in status.lower() or EDI_AFFIRMATIVE.search(rest_of_line):
        return True
    if EDI_NEGATIVE.search(rest_of_line):
        return False
    return None


def parse_po_line(line: str, vendor: VendorContext, report_date: date) -> PurchaseOrder:
    trimmed = line.strip()
    tokens = tokenize(trimmed)

    if len(tokens) < MIN_PO_TOKENS:
        raise LineParseError(f"PO line has {len(tokens)} tokens, expected at least {MIN_PO_TOKENS}")

    po_number, due_date, cases = tokens[0], tokens[1], tokens[2]
    if not is_po_number(po_number):
        raise LineParseError(f"Expected 5-digit PO number, got: {po_number}")
    if not is_date(due_date):
        raise LineParseError(f"Expected due date, got: {due_date}")
    if not is_integer(cases):
        raise LineParseError(f"Expected case count, got: {cases}")

    rest = tokens[3:]
    rest_of_line = " ".join(rest)

    status_match = STATUS_PATTERN.match(rest_of_line)
    status = status_match.group(1) if status_match else rest[0]

    dates = [token for token in rest if is_date(token)]
    times = [token for token in rest if is_time(token)]

    # Appointment is the first date+time pair; entered is the last date seen.
    appointment = f"{dates[0]} {times[0]}" if dates and times else None
    entered = dates[-1] if dates else None
    pick_up = True if PICKUP_PATTERN.search(rest_of_line) else None
    edi = _edi_status(status, rest_of_line)

    days_until_due, is_urgent, urgent_reasons = calculate_po_urgency(
        due_date, edi, appointment, report_date
    )

    return PurchaseOrder(
        po_number=po_number,
        vendor_id=vendor.id,
        vendor_name=vendor.name,
        due_date=due_date,
        total_cases=int(cases),
        status=status,
        edi=edi,
        appointment=appointment,
        pick_up=pick_up,
        entered=entered,
        days_until_due=days_until_due,
        is_urgent=is_urgent,
        urgent_reasons=urgent_reasons,
    )


def _special_order_status(line: str) -> SpecialOrderStatus:
    if DOQ_MARKER in line:
        return SpecialOrderStatus.DOQ
    if READY_PATTERN.search(line):
        return SpecialOrderStatus.READY
    return SpecialOrderStatus.ORDER


def parse_special_order_line(line: str, vendor: VendorContext) -> SpecialOrder:
    trimmed = line.strip()
    tokens = tokenize(trimmed)

    if len(tokens) < settings.MIN_SPECIAL_ORDER_TOKENS:
        raise LineParseError(
            f"Special order line has {len(tokens)} tokens, expected at least {settings.MIN_SPECIAL_ORDER_TOKENS}"
        )
    if not is_product_number(tokens[0]):
        raise LineParseError(f"Expected product number, got: {tokens[0]}")

    dates = [token for token in tokens if is_date(token)]
    if not dates:
        raise LineParseError("Special order line has no dates")

    po_number = next((token for token in tokens[1:] if is_po_number(token)), None)

    # Description runs until the first date or the customer number
    # (a 4-digit token past the first two words).
    description_tokens = []
    customer_number = ""
    customer_tokens = []
    customer_idx = None
    for idx in range(1, len(tokens)):
        token = tokens[idx]
        if is_date(token):
            break
        if is_customer_number(token) and idx > 2:
            customer_number = token
            customer_idx = idx
            for name_token in tokens[idx + 1 :]:
                if is_date(name_token):
                    break
                customer_tokens.append(name_token)
            break
        description_tokens.append(token)

    # Quantities follow the dates and PO number: ... Qty OnHd Status
    last_date_idx = max(idx for idx, token in enumerate(tokens) if is_date(token))
    start = max(last_date_idx, customer_idx or 0) + 1
    quantities = [
        int(token)
        for token in tokens[start:]
        if is_integer(token) and len(token) <= MAX_QUANTITY_DIGITS
    ]

    qty_ordered, on_hand = 0, 0
    if len(quantities) >= 2:
        qty_ordered, on_hand = quantities[-2], quantities[-1]
    elif len(quantities) == 1:
        qty_ordered = quantities[0]

    return SpecialOrder(
        product_number=tokens[0],
        description=" ".join(description_tokens),
        customer_number=customer_number,
        customer_name=" ".join(customer_tokens),
        date_entered=dates[0],
        date_doq=dates[1] if len(dates) > 1 else None,
        date_due=dates[2] if len(dates) > 2 else None,
        po_number=po_number,
        qty_ordered=qty_ordered,
        on_hand=on_hand,
        status=_special_order_status(trimmed),
        vendor_id=vendor.id,
        vendor_name=vendor.name,
    )


def extract_report_date(text: str) -> Optional[date]:
    """Looks for "RUN DATE: MM/DD/YY" anywhere in the extracted text."""
    match = re.search(r"RUN DATE:?\s*(\d{2}/\d{2}/\d{2})", text, re.IGNORECASE)
    if not match:
        return None
    try:
        return parse_report_date_token(match.group(1))
    except ValueError:
        return None
