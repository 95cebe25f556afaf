import os

# Settings are read at import time, so the environment must be set first
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
# Settings passes these explicitly to boto3
os.environ["AWS_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_DEFAULT_REGION"] = "us-west-2"
os.environ["AWS_REGION"] = "us-west-2"
os.environ["GUEST_PHOTO_UPLOAD_BUCKET_NAME"] = "test-guest-photos"
os.environ["RECIPE_TABLE_NAME"] = "test-recipes"
os.environ["PROCESS_RECIPE_STATE_MACHINE_ARN"] = (
    "arn:aws:states:us-west-2:123456789012:stateMachine:ProcessRecipeStateMachine"
)
os.environ["S3_FETCH_RETRY_DELAY"] = "0"

import boto3
import pytest
from moto import mock_aws

from feedr.core.schemas import ExtractedRecipe, Ingredient
from feedr.services.dynamodb_service import DynamoDBService

# Test data
TEST_RECIPE = ExtractedRecipe(
    title="Classic Pancakes",
    ingredients=[
        Ingredient(name="all-purpose flour", quantity="1 ½", unit="cup"),
        Ingredient(name="milk", quantity="1 1/4", unit="cup"),
        Ingredient(name="egg", quantity="1", unit="each"),
        Ingredient(name="salt", quantity=None, unit=None),
    ],
    instructions=[
        "Whisk the flour and salt together.",
        "Beat in the milk and egg until smooth.",
        "Cook ladlefuls on a hot griddle for 2 minutes per side.",
    ],
    prep_time="10 minutes",
    cook_time="15 minutes",
    servings="4",
)

RECIPE_PAGE_TEXT = (
    "Classic Pancakes. Serves 4. Ingredients: 1 ½ cups all-purpose flour, "
    "1 1/4 cups milk, 1 egg, a pinch of salt. Whisk the flour and salt together. "
    "Beat in the milk and egg until smooth. Cook on a hot griddle for 2 minutes per side."
)


@pytest.fixture
def test_recipe():
    return TEST_RECIPE.model_copy(deep=True)


@pytest.fixture
def aws():
    """Mock every AWS service for the duration of a test."""
    with mock_aws():
        yield


@pytest.fixture
def dynamodb_service(aws):
    """DynamoDBService backed by a moto table."""
    service = DynamoDBService()
    service.ensure_table_exists()
    return service


@pytest.fixture
def s3_bucket(aws):
    s3 = boto3.client("s3", region_name="us-west-2")
    s3.create_bucket(
        Bucket="test-guest-photos",
        CreateBucketConfiguration={"LocationConstraint": "us-west-2"},
    )
    return s3
