"""
Token shape predicates for whitespace-split report lines.

PDF text extraction collapses the fixed-width report into single-space-joined
text, so every recoverer works on tokens and their shapes, never on columns.
"""

import re
from typing import Optional

from . import settings

PRODUCT_NUMBER_RE = re.compile(r"^[A-Z0-9]{2,8}$", re.IGNORECASE)
DECIMAL_RE = re.compile(r"^\d+\.\d+$")
INTEGER_RE = re.compile(r"^\d+$")
SLOT_CODE_RE = re.compile(r"^[A-Z]{1,3}\d{3,5}$", re.IGNORECASE)
ALPHANUMERIC_RE = re.compile(r"^[A-Z0-9]+$", re.IGNORECASE)
DATE_RE = re.compile(r"^\d{2}/\d{2}/\d{2}$")
TIME_RE = re.compile(r"^\d{2}:\d{2}$")
PO_NUMBER_RE = re.compile(r"^\d{5}$")
CUSTOMER_NUMBER_RE = re.compile(r"^\d{4}$")

# Trailing dash marks a negative value in the IP column.
SIGN_MARKER = "-"


def tokenize(line: str) -> list[str]:
    return line.split()


def is_product_number(token: str) -> bool:
    return bool(PRODUCT_NUMBER_RE.match(token))


def is_decimal(token: str) -> bool:
    """Digits, dot, digits; a trailing sign marker is allowed."""
    return bool(DECIMAL_RE.match(strip_sign(token)))


def is_integer(token: str) -> bool:
    return bool(INTEGER_RE.match(token))


def is_numeric(token: str) -> bool:
    """Unsigned integer or decimal, as found in the numeric run."""
    return bool(INTEGER_RE.match(token) or DECIMAL_RE.match(token))


def is_slot_code(token: str) -> bool:
    return bool(SLOT_CODE_RE.match(token)) or token.upper() in settings.SLOT_WORDS


def is_alphanumeric(token: str) -> bool:
    return bool(ALPHANUMERIC_RE.match(token))


def is_date(token: str) -> bool:
    return bool(DATE_RE.match(token))


def is_time(token: str) -> bool:
    return bool(TIME_RE.match(token))


def is_po_number(token: str) -> bool:
    return bool(PO_NUMBER_RE.match(token))


def is_customer_number(token: str) -> bool:
    return bool(CUSTOMER_NUMBER_RE.match(token))


def strip_sign(token: str) -> str:
    return token[:-1] if token.endswith(SIGN_MARKER) else token


def parse_signed_decimal(token: str) -> Optional[float]:
    """
    Parses "4.4" or "0.7-" (negative). Returns None when the token is not a
    decimal at all.
    """
    cleaned = strip_sign(token)
    if not DECIMAL_RE.match(cleaned):
        return None
    value = float(cleaned)
    return -value if token.endswith(SIGN_MARKER) else value


def parse_decimal(token: str) -> Optional[float]:
    if not DECIMAL_RE.match(token):
        return None
    return float(token)


def parse_number(token: str) -> Optional[float]:
    if not is_numeric(token):
        return None
    return float(token)
