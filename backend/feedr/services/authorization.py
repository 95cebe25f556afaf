# backend/feedr/services/authorization.py

import json
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from feedr.core.schemas import Recipe

logger = logging.getLogger(__name__)

AUTHORIZED_TTL_SECONDS = 300
DENIED_TTL_SECONDS = 10


class IdentityContext(BaseModel):
    """Caller identity carried in the JSON authorization token."""
    model_config = ConfigDict(populate_by_name=True)

    identity_id: Optional[str] = Field(None, alias="identityId")
    username: Optional[str] = None
    is_authenticated: bool = Field(False, alias="isAuthenticated")


class AuthorizerResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_authorized: bool = Field(..., alias="isAuthorized")
    resolver_context: IdentityContext = Field(..., alias="resolverContext")
    ttl_override: int = Field(..., alias="ttlOverride")


def decode_identity(token: Optional[str]) -> IdentityContext:
    """Decode a token like '{"identityId": "...", "username": "..."}'; anything else is a guest."""
    if not token:
        return IdentityContext()
    try:
        decoded = json.loads(token)
    except ValueError:
        logger.info("Failed to parse authorization token, proceeding as guest")
        return IdentityContext()
    if not isinstance(decoded, dict):
        return IdentityContext()

    username = decoded.get("username") or None
    return IdentityContext(
        identity_id=decoded.get("identityId") or None,
        username=username,
        is_authenticated=bool(username),
    )


def _is_operation(query: str, operation_name: str, verb: str) -> bool:
    return "mutation" in query and verb in query and operation_name.startswith(verb)


def authorize_request(event: Dict[str, Any]) -> AuthorizerResponse:
    """
    Authorize an AppSync request and pass the caller identity to the resolver.

    Every operation is allowed here; update and delete resolvers check
    ownership with is_owner.
    """
    try:
        identity = decode_identity(event.get("authorizationToken"))
        request_context = event.get("requestContext") or {}
        query = request_context.get("queryString") or ""
        operation_name = request_context.get("operationName") or ""
        variables = request_context.get("variables") or {}

        protected = _is_operation(query, operation_name, "update") or _is_operation(query, operation_name, "delete")
        record_id = (variables.get("input") or {}).get("id")
        if protected and record_id:
            logger.info("Authorizing %s operation for id: %s", operation_name, record_id)
        else:
            logger.info("Authorizing general operation")

        return AuthorizerResponse(
            is_authorized=True,
            resolver_context=identity,
            ttl_override=AUTHORIZED_TTL_SECONDS,
        )
    except (AttributeError, TypeError) as e:
        logger.error("Error in custom authorizer: %s", e)
        return AuthorizerResponse(
            is_authorized=False,
            resolver_context=IdentityContext(),
            ttl_override=DENIED_TTL_SECONDS,
        )


def is_owner(recipe: Recipe, identity: IdentityContext) -> bool:
    """True when the caller is listed in owners or created the recipe as a guest."""
    owners = set(recipe.owners or [])
    if identity.username and identity.username in owners:
        return True
    if identity.identity_id and (
        identity.identity_id in owners or identity.identity_id == recipe.created_by
    ):
        return True
    return False


def owners_for(identity: IdentityContext) -> list:
    """Owner entries recorded on a recipe created by this caller."""
    return [value for value in (identity.username, identity.identity_id) if value]
