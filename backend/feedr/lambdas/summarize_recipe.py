# backend/feedr/lambdas/summarize_recipe.py

import asyncio
import logging

from feedr.core.exceptions import InputValidationError
from feedr.core.logging import configure_logging
from feedr.lambdas.payloads import require_id, unwrap
from feedr.services.langchain_service import LangChainService

configure_logging()
logger = logging.getLogger(__name__)


def handler(event, context):
    recipe_id = require_id(event)
    text = unwrap(event.get("extracted", event.get("extractedText")), "extractedText")
    if not text or not isinstance(text, str):
        raise InputValidationError("Invalid format for 'extractedText'")

    logger.info("Summarizing recipe %s (first 100 chars): %s...", recipe_id, text[:100])
    summary = asyncio.run(LangChainService().summarize_recipe_text(text))
    return {"summary": summary}
