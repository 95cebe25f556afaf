# backend/feedr/lambdas/extract_text_from_url.py

import logging

from feedr.core.logging import configure_logging
from feedr.services.scraper_service import ScraperService

configure_logging()
logger = logging.getLogger(__name__)


def handler(event, context):
    """Fetch the submitted page and return its text to the state machine."""
    logger.info("Extracting text for recipe %s from %s", event.get("id"), event.get("url"))
    text = ScraperService().extract_text_from_url(event.get("url"))
    return {"extractedText": text}
