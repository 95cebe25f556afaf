# backend/feedr/services/dynamodb_service.py

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

from feedr.core.config import settings
from feedr.core.exceptions import PersistenceError, RecipeNotFoundError
from feedr.core.schemas import (
    ExtractedRecipe,
    NutritionalValues,
    Recipe,
    RecipeStatus,
    RecipeSubmission,
)

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class DynamoDBService:
    def __init__(self, table_name: Optional[str] = None):
        """Initialize DynamoDB client with configuration."""
        self.dynamodb = boto3.resource(
            'dynamodb',
            aws_access_key_id=settings.AWS_ACCESS_KEY,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_REGION,
            endpoint_url=settings.DYNAMODB_ENDPOINT_URL
        )
        self.table = self.dynamodb.Table(table_name or settings.RECIPE_TABLE_NAME)

    def ensure_table_exists(self):
        """Ensure the Recipe table exists with a stream for insert events."""
        try:
            self.table.load()
        except self.dynamodb.meta.client.exceptions.ResourceNotFoundException:
            self.table = self.dynamodb.create_table(
                TableName=self.table.name,
                KeySchema=[
                    {'AttributeName': 'id', 'KeyType': 'HASH'}
                ],
                AttributeDefinitions=[
                    {'AttributeName': 'id', 'AttributeType': 'S'}
                ],
                BillingMode='PAY_PER_REQUEST',
                StreamSpecification={
                    'StreamEnabled': True,
                    'StreamViewType': 'NEW_IMAGE'
                }
            )
            self.table.wait_until_exists()

    def _item_to_recipe(self, item: Dict[str, Any]) -> Recipe:
        """Convert DynamoDB item back to Recipe model."""
        return Recipe.model_validate(item)

    def create_submission(
        self,
        submission: RecipeSubmission,
        owners: Optional[list] = None,
        created_by: Optional[str] = None,
    ) -> Recipe:
        """Insert a PENDING Recipe item; the table stream starts extraction."""
        item = {
            'id': submission.id,
            'url': submission.url,
            'pictureSubmissionUUID': submission.picture_submission_uuid,
            'language': submission.language.value,
            'status': RecipeStatus.PENDING.value,
            'owners': owners or [],
            'createdBy': created_by,
            'createdAt': submission.created_at.isoformat(),
            'updatedAt': _now(),
        }
        # Remove None values so optional attributes stay absent
        item = {k: v for k, v in item.items() if v is not None}
        try:
            self.table.put_item(
                Item=item,
                ConditionExpression='attribute_not_exists(id)'
            )
        except ClientError as e:
            logger.error("Failed to create recipe %s: %s", submission.id, e)
            raise PersistenceError(f"Failed to create recipe {submission.id}: {e}") from e
        return self._item_to_recipe(item)

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        """Retrieve a recipe from DynamoDB by ID."""
        try:
            response = self.table.get_item(Key={'id': str(recipe_id)})
        except ClientError as e:
            logger.error("Error reading recipe %s: %s", recipe_id, e)
            raise PersistenceError(f"Failed to read recipe {recipe_id}: {e}") from e
        item = response.get('Item')
        if item:
            return self._item_to_recipe(item)
        return None

    def delete_recipe(self, recipe_id: str) -> None:
        """Delete a recipe; raises RecipeNotFoundError when it does not exist."""
        try:
            self.table.delete_item(
                Key={'id': str(recipe_id)},
                ConditionExpression='attribute_exists(id)'
            )
        except ClientError as e:
            if e.response['Error']['Code'] == 'ConditionalCheckFailedException':
                raise RecipeNotFoundError(f"Recipe {recipe_id} not found") from e
            raise PersistenceError(f"Failed to delete recipe {recipe_id}: {e}") from e

    def _update(self, recipe_id: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Set attributes on an existing item; never creates one."""
        values = dict(values, updatedAt=_now())
        names = {f'#{key}': key for key in values}
        update_values = {f':{key}': value for key, value in values.items()}
        expression = 'SET ' + ', '.join(f'#{key} = :{key}' for key in values)
        try:
            response = self.table.update_item(
                Key={'id': str(recipe_id)},
                UpdateExpression=expression,
                ConditionExpression='attribute_exists(id)',
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=update_values,
                ReturnValues='ALL_NEW'
            )
        except ClientError as e:
            logger.error("Error updating recipe %s: %s", recipe_id, e)
            raise PersistenceError(f"Failed to update recipe {recipe_id}: {e}") from e
        return response['Attributes']

    def store_extracted_recipe(self, recipe_id: str, recipe: ExtractedRecipe) -> Recipe:
        """Write the structured recipe and mark it SUCCESS."""
        item = self._update(recipe_id, {
            'status': RecipeStatus.SUCCESS.value,
            'title': recipe.title,
            'ingredients': [ing.model_dump() for ing in recipe.ingredients],
            'instructions': list(recipe.instructions),
            'prep_time': recipe.prep_time or '',
            'cook_time': recipe.cook_time or '',
            'servings': recipe.servings or '',
            'description': '',
            'imageUrl': '',
        })
        logger.info("Recipe %s stored with status SUCCESS", recipe_id)
        return self._item_to_recipe(item)

    def mark_failure(self, recipe_id: str) -> None:
        self._update(recipe_id, {'status': RecipeStatus.FAILED.value})
        logger.info("Recipe %s marked as FAILED", recipe_id)

    def store_nutritional_information(
        self,
        recipe_id: str,
        values: Optional[NutritionalValues],
        status: RecipeStatus = RecipeStatus.SUCCESS,
    ) -> None:
        info = values.model_dump() if values else {
            'calories': '', 'fat': '', 'carbs': '', 'protein': ''
        }
        info['status'] = status.value
        self._update(recipe_id, {'nutritionalInformation': info})
