"""
Line classifier for the Inventory Order Report.

Classification runs an ordered table of named rules and stops at the first
match: vendor header, section markers, noise, then the context-sensitive
PO / special-order checks, then item lines. The only state it needs is
whether the caller is inside a "Special Order summary" section.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from . import settings
from .schemas import VendorContext
from .tokens import (
    is_date,
    is_decimal,
    is_integer,
    is_po_number,
    is_product_number,
    is_time,
    tokenize,
)


class LineKind(Enum):
    NOISE = "noise"
    VENDOR_HEADER = "vendor_header"
    SPECIAL_ORDER_SECTION_HEADER = "special_order_section_header"
    PO_SECTION_HEADER = "po_section_header"
    SECTION_END = "section_end"
    PO_LINE = "po_line"
    SPECIAL_ORDER_LINE = "special_order_line"
    ITEM_LINE = "item_line"


# Example: "Vendor: 00001740 FRITO LAY * Broker: Min Order: 1000"
VENDOR_PATTERN = re.compile(
    r"^Vendor:\s*(\d+)\s+(.+?)(?:\s*\*?\s*(?:Broker|Min Order):|$)", re.IGNORECASE
)

SPECIAL_ORDER_HEADER_PATTERN = re.compile(r"Special Order summary for this vendor", re.IGNORECASE)
PO_HEADER_PATTERN = re.compile(r"Open P\.O\. Summary for Vendor", re.IGNORECASE)

# Lines that close a "Special Order summary" block.
SECTION_END_PATTERNS = [
    re.compile(r"^Vnd\s+\d+\s+SubTot", re.IGNORECASE),
    re.compile(r"^Cases\s*:", re.IGNORECASE),
    re.compile(r"^Prod#\s+Unt", re.IGNORECASE),
    re.compile(r"^\*\s*\*\s*\*\s*\*\s*\*"),
]

NOISE_PATTERNS = [
    re.compile(r"^RUN DATE", re.IGNORECASE),
    re.compile(r"^RUN TIME", re.IGNORECASE),
    re.compile(r"^INVORD", re.IGNORECASE),
    re.compile(r"^Arrival date", re.IGNORECASE),
    re.compile(r"^BH/Ship date", re.IGNORECASE),
    re.compile(r"^Phone\s*:", re.IGNORECASE),
    re.compile(r"^Buyer\s*:", re.IGNORECASE),
    re.compile(r"^Freight:", re.IGNORECASE),
    re.compile(r"^\*\s*\*\s*\*\s*\*\s*\*"),  # ***** Sales *****
    re.compile(r"^Prod#\s+Unt\s+Size", re.IGNORECASE),
    re.compile(r"^=+$"),
    re.compile(r"^-+$"),
    re.compile(r"^TiHi:", re.IGNORECASE),
    re.compile(r"^Cube:", re.IGNORECASE),
    re.compile(r"^Open P\.O\.", re.IGNORECASE),
    re.compile(r"^P\.O\.\s+Due", re.IGNORECASE),
    re.compile(r"^Special Order summary", re.IGNORECASE),
    re.compile(r"^Vnd\s+\d+\s+SubTot", re.IGNORECASE),
    re.compile(r"^Cases\s*:", re.IGNORECASE),
    re.compile(r"^Dollars:", re.IGNORECASE),
    re.compile(r"^Ave\s+Gross", re.IGNORECASE),
    re.compile(r"^\s*$"),
    re.compile(r"^PAGE:", re.IGNORECASE),
    re.compile(r"^Performance Foodservice", re.IGNORECASE),
    re.compile(r"^Sort Option:", re.IGNORECASE),
    re.compile(r"^Min Order:", re.IGNORECASE),
    re.compile(r"^Min Type\s*:", re.IGNORECASE),
    re.compile(r"^Comment\d*:", re.IGNORECASE),
    re.compile(r"^Terms:", re.IGNORECASE),
    re.compile(r"^Frt Allow:", re.IGNORECASE),
    re.compile(r"^Net Freight:", re.IGNORECASE),
    re.compile(r"^On\s+Days$", re.IGNORECASE),
    re.compile(r"^Ordr Sply$", re.IGNORECASE),
    re.compile(r"^====="),
]


@dataclass
class LineClassification:
    kind: LineKind
    rule: str
    line: str
    tokens: list[str] = field(default_factory=list)
    vendor: Optional[VendorContext] = None


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    kind: LineKind
    matches: Callable[[str, list[str], bool], bool]
    # Pulls the payload a matching line carries (the vendor for a header).
    extract: Optional[Callable[[str], Optional[VendorContext]]] = None


def parse_vendor_line(line: str) -> Optional[VendorContext]:
    """Returns the vendor id/name from a vendor header, or None."""
    match = VENDOR_PATTERN.match(line.strip())
    if not match:
        return None

    vendor_id = match.group(1).strip()
    # Remove trailing asterisk and whitespace
    vendor_name = re.sub(r"\s*\*\s*$", "", match.group(2)).strip()
    return VendorContext(id=vendor_id, name=vendor_name)


def should_skip_line(line: str) -> bool:
    trimmed = line.strip()
    if not trimmed:
        return True
    return any(pattern.search(trimmed) for pattern in NOISE_PATTERNS)


def is_section_end(line: str) -> bool:
    trimmed = line.strip()
    return any(pattern.search(trimmed) for pattern in SECTION_END_PATTERNS)


def has_status_marker(token: str) -> bool:
    return any(token.startswith(marker) for marker in settings.PO_STATUS_MARKERS)


def is_po_line(tokens: list[str]) -> bool:
    """
    "60649 01/02/26 955 Conf:EDI Costs Yes 01/02/26 06:00 12/23/25"
    PO lines can appear anywhere after a vendor header, so this is decided by
    shape alone rather than by an "Open P.O. Summary" section.
    """
    if len(tokens) < 4:
        return False
    if not (is_po_number(tokens[0]) and is_date(tokens[1]) and is_integer(tokens[2])):
        return False

    rest = tokens[3:]
    if has_status_marker(rest[0]):
        return True
    return any(is_date(token) or is_time(token) for token in rest)


def is_special_order_line(tokens: list[str]) -> bool:
    if len(tokens) < settings.MIN_SPECIAL_ORDER_TOKENS:
        return False
    if not is_product_number(tokens[0]):
        return False
    return any(is_date(token) for token in tokens)


def is_item_line(tokens: list[str]) -> bool:
    """
    Necessary, not sufficient: product-number first token, enough tokens, and
    at least two decimals (the costs / IP) in the trailing window.
    """
    if len(tokens) < settings.MIN_ITEM_TOKENS:
        return False
    if not is_product_number(tokens[0]):
        return False

    tail = tokens[-settings.ITEM_TAIL_WINDOW:]
    return sum(1 for token in tail if is_decimal(token)) >= settings.MIN_TAIL_DECIMALS


# --- Rule Table ---
# Evaluated top to bottom; the first rule that matches decides the line.
CLASSIFICATION_RULES = [
    ClassificationRule(
        "vendor-header",
        LineKind.VENDOR_HEADER,
        lambda line, tokens, in_section: VENDOR_PATTERN.match(line) is not None,
        parse_vendor_line,
    ),
    ClassificationRule(
        "special-order-section-header",
        LineKind.SPECIAL_ORDER_SECTION_HEADER,
        lambda line, tokens, in_section: SPECIAL_ORDER_HEADER_PATTERN.search(line) is not None,
    ),
    ClassificationRule(
        "po-section-header",
        LineKind.PO_SECTION_HEADER,
        lambda line, tokens, in_section: PO_HEADER_PATTERN.search(line) is not None,
    ),
    ClassificationRule(
        "section-end",
        LineKind.SECTION_END,
        lambda line, tokens, in_section: in_section and is_section_end(line),
    ),
    ClassificationRule(
        "noise",
        LineKind.NOISE,
        lambda line, tokens, in_section: should_skip_line(line),
    ),
    ClassificationRule(
        "po-data-line",
        LineKind.PO_LINE,
        lambda line, tokens, in_section: is_po_line(tokens),
    ),
    ClassificationRule(
        "special-order-line",
        LineKind.SPECIAL_ORDER_LINE,
        lambda line, tokens, in_section: in_section and is_special_order_line(tokens),
    ),
    ClassificationRule(
        "item-line",
        LineKind.ITEM_LINE,
        lambda line, tokens, in_section: is_item_line(tokens),
    ),
]


def classify_line(line: str, in_special_section: bool = False) -> LineClassification:
    trimmed = line.strip()
    tokens = tokenize(trimmed)

    for rule in CLASSIFICATION_RULES:
        if rule.matches(trimmed, tokens, in_special_section):
            vendor = rule.extract(trimmed) if rule.extract else None
            return LineClassification(rule.kind, rule.name, trimmed, tokens, vendor)

    return LineClassification(LineKind.NOISE, "unrecognized", trimmed, tokens)
