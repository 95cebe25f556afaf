# backend/feedr/lambdas/generate_nutritional_information.py

import asyncio
import logging

from feedr.core.exceptions import ExtractionError, InputValidationError
from feedr.core.logging import configure_logging
from feedr.core.schemas import ExtractedRecipe, RecipeStatus
from feedr.lambdas.payloads import require_id, unwrap
from feedr.services.dynamodb_service import DynamoDBService
from feedr.services.langchain_service import LangChainService

configure_logging()
logger = logging.getLogger(__name__)


def handler(event, context):
    """
    Attach per-serving nutrition to a stored recipe.

    A language model failure is recorded as a FAILED nutrition status and the
    recipe itself stays SUCCESS.
    """
    recipe_id = require_id(event)
    processed = event.get("processed_recipe") or unwrap(event.get("result"), "processed_recipe")
    if not processed:
        raise InputValidationError("Missing 'processed_recipe' in input.")
    recipe = ExtractedRecipe.model_validate(processed)

    dynamodb = DynamoDBService()
    logger.info("Generating nutritional information for recipe ID: %s", recipe_id)
    try:
        values = asyncio.run(
            LangChainService().generate_nutritional_information(recipe.ingredients, recipe.servings)
        )
    except ExtractionError as e:
        logger.warning("Nutritional information unavailable for %s: %s", recipe_id, e)
        dynamodb.store_nutritional_information(recipe_id, None, RecipeStatus.FAILED)
        return {"id": recipe_id, "status": RecipeStatus.FAILED.value}

    dynamodb.store_nutritional_information(recipe_id, values)
    return {
        "id": recipe_id,
        "status": RecipeStatus.SUCCESS.value,
        "nutritional_information": values.model_dump(),
    }
