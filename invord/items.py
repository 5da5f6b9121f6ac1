import logging
from typing import Callable, Optional

from .errors import LineParseError
from .front import parse_front
from .schemas import Confidence, InventoryItem, VendorContext
from .tail import TailResult, parse_tail
from .tokens import is_product_number, tokenize

logger = logging.getLogger(__name__)


def _as_count(value: Optional[float], column: str, notes: list[str]) -> Optional[int]:
    """Quantity columns are whole cases; a fractional value is noted and truncated."""
    if value is None:
        return None
    if not float(value).is_integer():
        notes.append(f"{column} is fractional ({value}), truncated")
    return int(value)


def parse_item_line(
    line: str,
    vendor: VendorContext,
    tail_parser: Callable[[list[str]], TailResult] = parse_tail,
) -> InventoryItem:
    """
    Parses one item line into an InventoryItem.
    Field-level problems never raise: they lower the confidence tier and add
    a note. Only a line that has no product number at all is rejected.
    """
    trimmed = line.strip()
    tokens = tokenize(trimmed)
    if not tokens or not is_product_number(tokens[0]):
        raise LineParseError(f"Not an item line: {trimmed[:40]!r}")

    # Tail first (right to left), then front (left to right) for identification
    tail = tail_parser(tokens)
    front = parse_front(tokens)

    notes = list(tail.notes)
    confidence = tail.confidence

    if tail.days_of_supply is None and confidence != Confidence.LOW:
        confidence = Confidence.LOW
        notes.append("DaysSply is null - needs review")

    item = InventoryItem(
        vendor_id=vendor.id,
        vendor_name=vendor.name,
        product_number=front.product_number,
        special_order=front.special_order,
        unit=front.unit,
        size=front.size,
        brand=front.brand,
        description=front.description,
        ytd_sales=front.ytd_sales,
        average_sales=_as_count(tail.average, "Avg", notes),
        available=_as_count(tail.available, "Avail", notes),
        on_order=_as_count(tail.on_order, "Ordr", notes),
        days_of_supply=tail.days_of_supply,
        landed_cost=tail.landed_cost,
        market_cost=tail.market_cost,
        slot=tail.slot,
        item_priority=tail.item_priority,
        confidence=confidence,
        numeric_columns=tail.numeric_columns,
        raw_line=trimmed,
        parse_notes=notes,
    )

    if item.confidence != Confidence.HIGH:
        logger.debug(f"{item.product_number}: {item.confidence.value} confidence ({'; '.join(notes)})")

    return item
