import re
from dataclasses import dataclass
from typing import Optional

from . import settings
from .tokens import is_integer, is_numeric

SIZE_PATTERNS = [
    re.compile(r"^\d+/[\d.]+$"),  # "72/1", "64/1.375"
    re.compile(r"^[\d.]+/[\d.]+$"),
    re.compile(r"^OZ$", re.IGNORECASE),
    re.compile(r"^LB$", re.IGNORECASE),
    re.compile(r"^GAL$", re.IGNORECASE),
    re.compile(r"^[\d.]*/?[\d.]+OZ$", re.IGNORECASE),  # "12OZ", "104/.7OZ"
]

# A Y-T-D value is a bare integer with at least this many numbers among the
# next SALES_LOOKAHEAD tokens.
SALES_LOOKAHEAD = 4
MIN_SALES_FOLLOWERS = 2


@dataclass
class FrontResult:
    product_number: str = ""
    special_order: bool = False
    unit: str = ""
    size: str = ""
    brand: str = ""
    description: str = ""
    ytd_sales: Optional[int] = None


def is_size_token(token: str) -> bool:
    return any(pattern.match(token) for pattern in SIZE_PATTERNS)


def starts_sales_block(tokens: list[str], idx: int) -> bool:
    if not is_integer(tokens[idx]):
        return False
    lookahead = tokens[idx + 1 : idx + 1 + SALES_LOOKAHEAD]
    return sum(1 for token in lookahead if is_numeric(token)) >= MIN_SALES_FOLLOWERS


def parse_front(tokens: list[str]) -> FrontResult:
    """
    Left-to-right, greedy: ProdNo, [S/O | unit], size tokens, brand, then the
    description up to the first integer that opens the sales columns.
    """
    result = FrontResult()
    idx = 0

    if idx < len(tokens):
        result.product_number = tokens[idx]
        idx += 1

    if idx < len(tokens) and tokens[idx] == settings.SPECIAL_ORDER_MARKER:
        result.special_order = True
        result.unit = settings.SPECIAL_ORDER_MARKER
        idx += 1
    elif idx < len(tokens) and tokens[idx].upper() in settings.UNIT_CODES:
        result.unit = tokens[idx]
        idx += 1

    size_tokens = []
    while idx < len(tokens) and is_size_token(tokens[idx]):
        size_tokens.append(tokens[idx])
        idx += 1
    result.size = " ".join(size_tokens)

    if idx < len(tokens):
        result.brand = tokens[idx]
        idx += 1

    description_tokens = []
    while idx < len(tokens):
        if starts_sales_block(tokens, idx):
            result.ytd_sales = int(tokens[idx])
            break
        description_tokens.append(tokens[idx])
        idx += 1
    result.description = " ".join(description_tokens)

    return result
