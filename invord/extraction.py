"""
PDF → text boundary.

pdfplumber's own text layout is tried first. Some report exports come back
with the table cells scattered, so when that text fails the validity check
the lines are rebuilt from the page words grouped by vertical position.
"""

import logging
import warnings
from pathlib import Path

import pdfplumber

from .errors import InvalidReportError
from .parser import is_valid_extraction
from .utils import load_text

# Suppress Pillow warnings about invalid ICC profiles
warnings.filterwarnings("ignore", message=".*Invalid profile.*")

logger = logging.getLogger(__name__)


def extract_with_layout(pdf_path: Path) -> str:
    with pdfplumber.open(pdf_path) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages)


def group_words_into_lines(words: list[dict]) -> list[str]:
    """
    Words sharing a rounded `top` coordinate form one line; lines run top to
    bottom and words left to right.
    """
    rows: dict[int, list[dict]] = {}
    for word in words:
        rows.setdefault(round(word["top"]), []).append(word)

    lines = []
    for top in sorted(rows):
        row = sorted(rows[top], key=lambda w: w["x0"])
        lines.append(" ".join(w["text"] for w in row))
    return lines


def extract_with_words(pdf_path: Path) -> str:
    lines = []
    with pdfplumber.open(pdf_path) as pdf:
        for page in pdf.pages:
            lines.extend(group_words_into_lines(page.extract_words()))
    return "\n".join(lines)


def extract_text(pdf_path: Path) -> str:
    """
    Returns the report text of a PDF, trying the layout extractor first and
    the word-grouping extractor second. Raises InvalidReportError when
    neither produces a usable report.
    """
    try:
        text = extract_with_layout(pdf_path)
        if is_valid_extraction(text):
            return text
        logger.warning(f"Primary extraction of {pdf_path.name} looks incomplete, trying fallback...")
    except Exception as e:
        logger.warning(f"Primary extraction of {pdf_path.name} failed ({e}), trying fallback...")

    try:
        text = extract_with_words(pdf_path)
    except Exception as e:
        raise InvalidReportError(f"Both PDF extraction methods failed for {pdf_path.name}: {e}") from e

    if not is_valid_extraction(text):
        raise InvalidReportError(f"PDF extraction of {pdf_path.name} produced insufficient or invalid content")
    return text


def read_report(path: Path) -> str:
    """Reads a report from a .pdf or from already-extracted .txt text."""
    if path.suffix.lower() == ".pdf":
        return extract_text(path)
    return load_text(path)
