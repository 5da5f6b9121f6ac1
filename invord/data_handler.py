import json
import logging
from pathlib import Path
from typing import Optional

import requests

from . import settings
from .schemas import ParseResponse

logger = logging.getLogger(__name__)


def build_payload(response: ParseResponse) -> dict:
    """The JSON-ready parse result, using the camelCase export keys."""
    return response.model_dump(mode="json", by_alias=True)


def save_outputs(response: ParseResponse, base_name: Optional[str] = None) -> Optional[Path]:
    """Saves the parse result as JSON, named after the report date."""
    base_name = base_name or settings.OUTPUT_FILENAME_BASE
    if not settings.SAVE_JSON_OUTPUT:
        logger.info("INFO: Skipping JSON file save as per configuration.")
        return None

    settings.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    json_path = settings.OUTPUT_DIR / f"{base_name}_{response.report_date.isoformat()}.json"

    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(build_payload(response), f, indent=2)
    logger.info(f"✅ JSON output saved to: {json_path}")
    return json_path


def post_to_webhook(response: ParseResponse) -> bool:
    """
    Posts the parse result to the configured webhook.
    """
    if not settings.WEBHOOK_URL:
        logger.warning("⚠️ WEBHOOK_URL not set. Skipping webhook post.")
        return False

    logger.info(f"🚀 Posting parse result to webhook: {settings.WEBHOOK_URL}")

    try:
        resp = requests.post(settings.WEBHOOK_URL, json=build_payload(response), timeout=15)
        resp.raise_for_status()
        logger.info("✅ Parse result successfully posted to webhook.")
        return True
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Error posting to webhook: {e}")
        return False
