# backend/feedr/lambdas/mark_failure.py

import logging

from feedr.core.exceptions import PersistenceError
from feedr.core.logging import configure_logging
from feedr.core.schemas import RecipeStatus
from feedr.lambdas.payloads import require_id
from feedr.services.dynamodb_service import DynamoDBService

configure_logging()
logger = logging.getLogger(__name__)


def handler(event, context):
    recipe_id = require_id(event)
    logger.error("Recipe %s failed with: %s", recipe_id, event.get("error"))
    try:
        DynamoDBService().mark_failure(recipe_id)
    except PersistenceError as e:
        # The execution still has to reach its Fail state
        logger.error("Error marking recipe %s as FAILED: %s", recipe_id, e)
    return {"id": recipe_id, "status": RecipeStatus.FAILED.value}
