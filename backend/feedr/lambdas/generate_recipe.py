# backend/feedr/lambdas/generate_recipe.py

import asyncio
import logging

from feedr.core.exceptions import InputValidationError
from feedr.core.logging import configure_logging
from feedr.core.schemas import Language
from feedr.lambdas.payloads import require_id, unwrap
from feedr.services.dynamodb_service import DynamoDBService
from feedr.services.langchain_service import LangChainService

configure_logging()
logger = logging.getLogger(__name__)


def handler(event, context):
    """Structure the summary into a recipe and store it under the submission id."""
    recipe_id = require_id(event)
    summary = unwrap(event.get("summary"), "summary")
    if not summary or not isinstance(summary, str):
        raise InputValidationError("Missing 'summary' in input.")

    try:
        language = Language(event.get("language") or Language.EN.value)
    except ValueError:
        logger.warning("Unsupported language %r for recipe %s, using English", event.get("language"), recipe_id)
        language = Language.EN

    logger.info("Generating recipe for ID: %s in language: %s", recipe_id, language.value)
    recipe = asyncio.run(LangChainService().structure_recipe(summary, language))
    DynamoDBService().store_extracted_recipe(recipe_id, recipe)

    return {
        "id": recipe_id,
        "processed_recipe": recipe.model_dump(),
    }
