# backend/feedr/lambdas/payloads.py

from typing import Any, Dict, Optional

from feedr.core.exceptions import InputValidationError


def unwrap(value: Any, key: str) -> Optional[Any]:
    """
    Pull a value out of a Step Functions result.

    Task results may arrive as the bare value, as {key: value}, or inside the
    {"Payload": ...} wrapper of the Lambda service integration.
    """
    while isinstance(value, dict) and "Payload" in value:
        value = value["Payload"]
    if isinstance(value, dict):
        return value.get(key)
    return value


def require_id(event: Dict[str, Any]) -> str:
    recipe_id = event.get("id") or unwrap(event.get("result"), "id")
    if not recipe_id:
        raise InputValidationError("Missing 'id' in input.")
    return recipe_id
