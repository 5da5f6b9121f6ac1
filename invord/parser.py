"""
Orchestrates one parse of an Inventory Order Report.

Lines are classified one at a time while a small ParserState carries the
current vendor and whether we are inside a "Special Order summary" block.
The state lives in the call, never at module level, so concurrent parses of
different uploads cannot see each other.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from . import settings
from .aggregator import calculate_po_stats, calculate_stats
from .classifier import LineKind, classify_line
from .errors import InvalidReportError
from .items import parse_item_line
from .orders import extract_report_date, parse_po_line, parse_special_order_line
from .schemas import InventoryItem, ParseResponse, PurchaseOrder, SpecialOrder, VendorContext
from .tail import get_tail_parser

logger = logging.getLogger(__name__)

VENDOR_MARKER_RE = re.compile(r"Vendor:\s*\d+", re.IGNORECASE)
PRODUCT_HEADER_RE = re.compile(r"Prod#", re.IGNORECASE)
ITEM_SHAPE_RE = re.compile(r"^[A-Z0-9]{2,8}\s+(CS|S/O)", re.IGNORECASE | re.MULTILINE)


@dataclass
class ParserState:
    vendor: Optional[VendorContext] = None
    in_special_section: bool = False


def is_valid_extraction(text: str) -> bool:
    """
    Minimal sanity check on the whole text: long enough, and at least one of
    a vendor marker, the product column header, or an item-shaped line.
    """
    if len(text) < settings.MIN_EXTRACTED_TEXT_LENGTH:
        return False

    has_vendor = bool(VENDOR_MARKER_RE.search(text))
    has_prod_header = bool(PRODUCT_HEADER_RE.search(text))
    has_line_item = bool(ITEM_SHAPE_RE.search(text))
    return has_vendor or has_prod_header or has_line_item


def validate_extracted_text(text: str):
    if not is_valid_extraction(text):
        raise InvalidReportError(
            "Extracted text is not an Inventory Order Report (too short, or no vendor/product markers)"
        )


def parse_lines(
    lines: Iterable[str],
    report_date: date,
    tail_strategy: Optional[str] = None,
) -> ParseResponse:
    """Classifies every line and assembles the three record collections."""
    tail_parser = get_tail_parser(tail_strategy or settings.TAIL_STRATEGY)

    state = ParserState()
    items: list[InventoryItem] = []
    purchase_orders: list[PurchaseOrder] = []
    special_orders: list[SpecialOrder] = []
    seen_pos: set[str] = set()
    errors: list[str] = []

    for line_num, line in enumerate(lines, start=1):
        try:
            result = classify_line(line, state.in_special_section)
            kind = result.kind

            if kind is LineKind.VENDOR_HEADER:
                state = ParserState(vendor=result.vendor)
                logger.debug(f"Line {line_num}: vendor {state.vendor.id} {state.vendor.name}")
                continue

            if kind is LineKind.SPECIAL_ORDER_SECTION_HEADER:
                state.in_special_section = True
                continue

            if kind in (LineKind.PO_SECTION_HEADER, LineKind.SECTION_END):
                state.in_special_section = False
                continue

            if kind is LineKind.NOISE:
                continue

            if state.vendor is None:
                label = {
                    LineKind.ITEM_LINE: "Item",
                    LineKind.PO_LINE: "Purchase order",
                    LineKind.SPECIAL_ORDER_LINE: "Special order",
                }[kind]
                errors.append(f"Line {line_num}: {label} found before vendor declaration")
                continue

            if kind is LineKind.PO_LINE:
                po = parse_po_line(line, state.vendor, report_date)
                if po.po_number in seen_pos:
                    logger.debug(f"Line {line_num}: duplicate PO {po.po_number} ignored")
                    continue
                seen_pos.add(po.po_number)
                purchase_orders.append(po)

            elif kind is LineKind.SPECIAL_ORDER_LINE:
                special_orders.append(parse_special_order_line(line, state.vendor))

            elif kind is LineKind.ITEM_LINE:
                items.append(parse_item_line(line, state.vendor, tail_parser))

        except Exception as e:
            errors.append(f"Line {line_num}: Parse error - {e}")

    stats = calculate_stats(items, special_orders)
    po_stats = calculate_po_stats(purchase_orders, special_orders)

    logger.info(
        f"Parsed {stats.total_items} items from {stats.vendor_count} vendors, "
        f"{po_stats.total_pos} POs, {po_stats.special_order_count} special orders"
    )
    if errors:
        logger.warning(f"{len(errors)} lines could not be parsed")

    return ParseResponse(
        items=items,
        purchase_orders=purchase_orders,
        special_orders=special_orders,
        stats=stats,
        po_stats=po_stats,
        report_date=report_date,
        parse_errors=errors,
    )


def parse_report_text(
    text: str,
    report_date: Optional[date] = None,
    tail_strategy: Optional[str] = None,
) -> ParseResponse:
    """
    Entry point for extracted report text. Rejects text that is not an
    Inventory Order Report; otherwise the report date comes from the caller,
    the RUN DATE header, or today, in that order.
    """
    validate_extracted_text(text)

    if report_date is None:
        report_date = extract_report_date(text)
    if report_date is None:
        report_date = date.today()
        logger.warning(f"No RUN DATE found in report, using today ({report_date})")

    return parse_lines(text.split("\n"), report_date, tail_strategy)
