# backend/feedr/lambdas/owners_authorizer.py

import logging

from feedr.core.logging import configure_logging
from feedr.services.authorization import authorize_request

configure_logging()
logger = logging.getLogger(__name__)


def handler(event, context):
    response = authorize_request(event)
    logger.info("Authorized=%s authenticated=%s", response.is_authorized, response.resolver_context.is_authenticated)
    return response.model_dump(by_alias=True)
