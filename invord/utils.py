from pathlib import Path
from typing import Optional
import logging

from . import settings

logger = logging.getLogger(__name__)


def find_latest_report(directory: Path, prefix: str) -> Optional[Path]:
    """
    Returns the most recently modified report in `directory` whose name
    starts with `prefix` and has a supported suffix (.pdf / .txt).
    """
    if not directory.exists():
        logger.warning(f"Input directory not found: {directory}")
        return None

    candidates = [
        path
        for path in directory.glob(f"{prefix}*")
        if path.is_file() and path.suffix.lower() in settings.REPORT_FILE_SUFFIXES
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda path: path.stat().st_mtime)


def load_text(file_path: Path) -> str:
    """
    Reads already-extracted report text with an encoding fallback:
    1. UTF-8 with BOM support ('utf-8-sig').
    2. Latin-1, which can read any byte but might misinterpret characters.
    """
    try:
        return file_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError:
        logger.info(f"UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'.")
        return file_path.read_text(encoding="latin-1")
