"""
Right-to-left recovery of the trailing item-line fields.

Expected tail: ... Y-T-D Wk3 Wk2 Wk1 Curr Avg Avail Ordr Sply LndCst MrkCst Slot IP

The four rightmost fields sit at fixed positions. Everything to their left is
a run of numbers whose length varies (blank columns simply vanish from the
extracted text), so the run length decides which columns are present and how
much the result can be trusted.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from .schemas import Confidence
from .tokens import (
    is_alphanumeric,
    is_decimal,
    is_integer,
    is_numeric,
    is_slot_code,
    parse_decimal,
    parse_number,
    parse_signed_decimal,
    strip_sign,
)

FIXED_TAIL_FIELDS = 4

# Run lengths (days of supply included) for each tier.
FULL_RUN_LENGTH = 9  # Y-T-D .. Sply, every column filled
NO_ORDER_RUN_LENGTH = 8  # Ordr column blank
HIGH_RUN_LENGTH = 7
MEDIUM_RUN_LENGTH = 5


@dataclass
class RunFields:
    average: Optional[float] = None
    available: Optional[float] = None
    on_order: Optional[float] = None


@dataclass
class TailResult:
    item_priority: Optional[float] = None
    slot: Optional[str] = None
    market_cost: Optional[float] = None
    landed_cost: Optional[float] = None
    days_of_supply: Optional[float] = None
    on_order: Optional[float] = None
    available: Optional[float] = None
    average: Optional[float] = None
    confidence: Confidence = Confidence.HIGH
    numeric_columns: int = 0
    notes: list[str] = field(default_factory=list)
    consumed_count: int = 0


def resolve_numeric_run(preceding: list[float]) -> RunFields:
    """
    Assigns average / available / on-order for a short run.

    `preceding` holds the run values left of days-of-supply, in line order.
    With three values the column count is ambiguous: if the leftmost is at
    least as large as the middle one it reads as Avg Avail Ordr, otherwise the
    order column is taken as blank and the nearer two are Avg Avail. This is a
    magnitude heuristic tuned on one vendor's layout, not a guarantee.
    """
    if len(preceding) >= 3:
        third, second, first = preceding[-3:]
        if third >= second:
            return RunFields(average=third, available=second, on_order=first)
        return RunFields(average=second, available=first)
    if len(preceding) == 2:
        return RunFields(average=preceding[0], available=preceding[1])
    if len(preceding) == 1:
        return RunFields(available=preceding[0])
    return RunFields()


def collect_numeric_run(tokens: list[str], end: int) -> list[float]:
    """
    Walks left from tokens[end] while tokens are numeric and returns the run
    in line order. Token 0 is the product number and never joins the run.
    """
    run = []
    idx = end
    while idx >= 1 and is_numeric(tokens[idx]):
        run.append(parse_number(tokens[idx]))
        idx -= 1
    run.reverse()
    return run


def _too_short(tokens: list[str]) -> Optional[TailResult]:
    if len(tokens) >= FIXED_TAIL_FIELDS:
        return None
    return TailResult(
        confidence=Confidence.LOW,
        notes=["Too few tokens for tail parsing"],
    )


def parse_tail(
    tokens: list[str],
    run_resolver: Callable[[list[float]], RunFields] = resolve_numeric_run,
) -> TailResult:
    """
    Tiered (column-counting) tail recovery. Fixed fields each own one
    position, so a field that fails to parse still uses up its token.
    """
    short = _too_short(tokens)
    if short is not None:
        return short

    result = TailResult()
    fixed_failed = False
    idx = len(tokens) - 1

    # IP - last token, decimal with optional trailing sign marker
    ip_token = tokens[idx]
    result.item_priority = parse_signed_decimal(ip_token)
    if result.item_priority is None:
        result.notes.append(f"Expected IP as decimal, got: {ip_token}")
        fixed_failed = True
    idx -= 1

    # Slot - slot code, bare warehouse word, or any alphanumeric code
    slot_token = tokens[idx]
    if is_slot_code(slot_token) or is_alphanumeric(slot_token):
        result.slot = slot_token
    else:
        result.notes.append(f"Expected Slot code, got: {slot_token}")
        fixed_failed = True
    idx -= 1

    mrk_token = tokens[idx]
    result.market_cost = parse_decimal(mrk_token)
    if result.market_cost is None:
        result.notes.append(f"Expected MrkCst as decimal, got: {mrk_token}")
        fixed_failed = True
    idx -= 1

    lnd_token = tokens[idx]
    result.landed_cost = parse_decimal(lnd_token)
    if result.landed_cost is None:
        result.notes.append(f"Expected LndCst as decimal, got: {lnd_token}")
        fixed_failed = True
    idx -= 1

    result.consumed_count = FIXED_TAIL_FIELDS

    run = collect_numeric_run(tokens, idx)
    result.numeric_columns = len(run)
    result.consumed_count += len(run)

    if not run:
        result.notes.append("DaysSply is null - needs review")
        result.confidence = Confidence.LOW
        return result

    # The run always ends in Sply; this is the one column position that holds
    # regardless of how many others went blank.
    result.days_of_supply = run[-1]
    k = len(run)

    if k >= FULL_RUN_LENGTH:
        result.on_order, result.available, result.average = run[-2], run[-3], run[-4]
        result.confidence = Confidence.HIGH
    elif k == NO_ORDER_RUN_LENGTH:
        result.available, result.average = run[-2], run[-3]
        result.confidence = Confidence.HIGH
    elif k == HIGH_RUN_LENGTH:
        result.available = run[-2]
        result.confidence = Confidence.HIGH
    elif k >= MEDIUM_RUN_LENGTH:
        result.available = run[-2]
        result.confidence = Confidence.MEDIUM
    else:
        resolved = run_resolver(run[:-1])
        result.average = resolved.average
        result.available = resolved.available
        result.on_order = resolved.on_order
        result.confidence = Confidence.LOW
        result.notes.append(f"Only {k} numeric columns before costs")

    if fixed_failed:
        result.confidence = Confidence.LOW

    return result


def parse_tail_legacy(tokens: list[str]) -> TailResult:
    """
    Strict positional consumer: IP Slot MrkCst LndCst Sply Ordr Avail, with a
    single high/low confidence bit. A field that fails to parse leaves its
    token for the next field. Kept for output compatibility with older exports.
    """
    short = _too_short(tokens)
    if short is not None:
        return short

    result = TailResult()
    idx = len(tokens) - 1

    def low(note: str):
        result.notes.append(note)
        result.confidence = Confidence.LOW

    ip_token = tokens[idx]
    if is_decimal(ip_token):
        result.item_priority = parse_signed_decimal(ip_token)
        result.consumed_count += 1
        idx -= 1
    else:
        low(f"Expected IP as decimal, got: {ip_token}")

    if idx >= 0:
        slot_token = tokens[idx]
        if is_slot_code(slot_token) or is_alphanumeric(slot_token):
            result.slot = slot_token
            result.consumed_count += 1
            idx -= 1
        else:
            low(f"Expected Slot code, got: {slot_token}")

    if idx >= 0:
        mrk_token = tokens[idx]
        if is_decimal(mrk_token):
            result.market_cost = float(strip_sign(mrk_token))
            result.consumed_count += 1
            idx -= 1
        else:
            low(f"Expected MrkCst as decimal, got: {mrk_token}")

    if idx >= 0:
        lnd_token = tokens[idx]
        if is_decimal(lnd_token):
            result.landed_cost = float(strip_sign(lnd_token))
            result.consumed_count += 1
            idx -= 1
        else:
            low(f"Expected LndCst as decimal, got: {lnd_token}")

    if idx >= 0:
        sply_token = tokens[idx]
        if is_numeric(sply_token):
            result.days_of_supply = float(sply_token)
            result.consumed_count += 1
            result.numeric_columns += 1
            idx -= 1
        else:
            low(f"Expected DaysSply as number, got: {sply_token}")

    if idx >= 0:
        ordr_token = tokens[idx]
        if is_integer(ordr_token):
            result.on_order = float(ordr_token)
            result.consumed_count += 1
            result.numeric_columns += 1
            idx -= 1
        else:
            low(f"Expected Ordr as integer, got: {ordr_token}")

    if idx >= 0:
        avail_token = tokens[idx]
        if is_integer(avail_token):
            result.available = float(avail_token)
            result.consumed_count += 1
            result.numeric_columns += 1
            idx -= 1
        else:
            low(f"Expected Avail as integer, got: {avail_token}")

    if result.days_of_supply is None:
        low("DaysSply is null - needs review")

    return result


TAIL_STRATEGIES = {
    "tiered": parse_tail,
    "legacy": parse_tail_legacy,
}


def get_tail_parser(strategy: str) -> Callable[[list[str]], TailResult]:
    try:
        return TAIL_STRATEGIES[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown tail strategy '{strategy}'. Expected one of: {', '.join(TAIL_STRATEGIES)}"
        ) from None
