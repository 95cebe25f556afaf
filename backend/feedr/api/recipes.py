# backend/feedr/api/recipes.py

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException

from feedr.core.exceptions import InputValidationError, PersistenceError, RecipeNotFoundError
from feedr.core.schemas import (
    Recipe,
    RecipeCreateRequest,
    RecipeSubmission,
    ScaleIngredientsRequest,
    ScaleRequest,
    ScaleResponse,
)
from feedr.services.authorization import IdentityContext, decode_identity, is_owner, owners_for
from feedr.services.dynamodb_service import DynamoDBService
from feedr.services.ingredient_scaler import format_quantity, scale_ingredients, to_multiplier
from feedr.services.workflow import build_workflow_input

router = APIRouter()


def get_dynamodb_service() -> DynamoDBService:
    """Dependency to get DynamoDBService instance."""
    return DynamoDBService()


def get_identity(authorization: Optional[str] = Header(None)) -> IdentityContext:
    return decode_identity(authorization)


def _load_recipe(recipe_id: str, dynamodb: DynamoDBService) -> Recipe:
    try:
        recipe = dynamodb.get_recipe(recipe_id)
    except PersistenceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if recipe is None:
        raise HTTPException(status_code=404, detail=f"Recipe {recipe_id} not found")
    return recipe


def _scale(ingredients, multiplier) -> ScaleResponse:
    try:
        factor = to_multiplier(multiplier)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return ScaleResponse(
        multiplier=format_quantity(factor),
        ingredients=scale_ingredients(ingredients, factor),
    )


@router.post("/", response_model=Recipe, status_code=201)
async def create_recipe(
    request: RecipeCreateRequest,
    identity: IdentityContext = Depends(get_identity),
    dynamodb: DynamoDBService = Depends(get_dynamodb_service)
):
    """Create a PENDING recipe; inserting it starts extraction."""
    submission = RecipeSubmission(
        id=str(uuid.uuid4()),
        url=request.url or None,
        picture_submission_uuid=request.picture_submission_uuid or None,
        language=request.language,
    )
    try:
        build_workflow_input(submission)
        return dynamodb.create_submission(
            submission,
            owners=owners_for(identity),
            created_by=identity.identity_id,
        )
    except InputValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/scale", response_model=ScaleResponse)
async def scale_ingredient_list(request: ScaleIngredientsRequest):
    """Scale an arbitrary ingredient list."""
    return _scale(request.ingredients, request.multiplier)


@router.get("/{recipe_id}", response_model=Recipe)
async def get_recipe(
    recipe_id: str,
    dynamodb: DynamoDBService = Depends(get_dynamodb_service)
):
    return _load_recipe(recipe_id, dynamodb)


@router.post("/{recipe_id}/scale", response_model=ScaleResponse)
async def scale_recipe(
    recipe_id: str,
    request: ScaleRequest,
    dynamodb: DynamoDBService = Depends(get_dynamodb_service)
):
    """Scale the stored ingredients of a recipe without saving the result."""
    recipe = _load_recipe(recipe_id, dynamodb)
    return _scale(recipe.ingredients, request.multiplier)


@router.delete("/{recipe_id}", status_code=204)
async def delete_recipe(
    recipe_id: str,
    identity: IdentityContext = Depends(get_identity),
    dynamodb: DynamoDBService = Depends(get_dynamodb_service)
):
    recipe = _load_recipe(recipe_id, dynamodb)
    if not is_owner(recipe, identity):
        raise HTTPException(status_code=403, detail="Only an owner can delete this recipe")
    try:
        dynamodb.delete_recipe(recipe_id)
    except RecipeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=502, detail=str(e))
