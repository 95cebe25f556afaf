from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from feedr.core.exceptions import PersistenceError, RecipeNotFoundError
from feedr.core.schemas import NutritionalValues, RecipeStatus, RecipeSubmission

# Use a fixed test ID for consistency
TEST_RECIPE_ID = "test-recipe-001"


@pytest.fixture
def submission():
    return RecipeSubmission(id=TEST_RECIPE_ID, url="https://example.com/pancakes", language="fr")


def test_create_submission(dynamodb_service, submission):
    recipe = dynamodb_service.create_submission(submission, owners=["alice"], created_by="us-west-2:abc")

    assert recipe.id == TEST_RECIPE_ID
    assert recipe.status == RecipeStatus.PENDING
    assert recipe.language.value == "fr"
    assert recipe.owners == ["alice"]

    stored = dynamodb_service.get_recipe(TEST_RECIPE_ID)
    assert stored.url == "https://example.com/pancakes"
    assert stored.picture_submission_uuid is None
    assert stored.created_by == "us-west-2:abc"


def test_create_submission_twice_fails(dynamodb_service, submission):
    dynamodb_service.create_submission(submission)
    with pytest.raises(PersistenceError):
        dynamodb_service.create_submission(submission)


def test_store_extracted_recipe(dynamodb_service, submission, test_recipe):
    dynamodb_service.create_submission(submission)

    recipe = dynamodb_service.store_extracted_recipe(TEST_RECIPE_ID, test_recipe)

    assert recipe.status == RecipeStatus.SUCCESS
    assert recipe.title == "Classic Pancakes"
    assert [i.quantity for i in recipe.ingredients] == ["1 ½", "1 1/4", "1", None]
    assert recipe.instructions == test_recipe.instructions
    assert recipe.servings == "4"
    # Submission fields survive the update
    assert recipe.url == "https://example.com/pancakes"


def test_store_extracted_recipe_null_timings_become_empty(dynamodb_service, submission, test_recipe):
    dynamodb_service.create_submission(submission)
    test_recipe.prep_time = None
    test_recipe.servings = None

    recipe = dynamodb_service.store_extracted_recipe(TEST_RECIPE_ID, test_recipe)

    assert recipe.prep_time == ""
    assert recipe.servings == ""


def test_store_for_missing_recipe_raises(dynamodb_service, test_recipe):
    with pytest.raises(PersistenceError):
        dynamodb_service.store_extracted_recipe("missing-id", test_recipe)


def test_mark_failure(dynamodb_service, submission):
    dynamodb_service.create_submission(submission)
    dynamodb_service.mark_failure(TEST_RECIPE_ID)
    assert dynamodb_service.get_recipe(TEST_RECIPE_ID).status == RecipeStatus.FAILED


def test_store_nutritional_information(dynamodb_service, submission):
    dynamodb_service.create_submission(submission)
    values = NutritionalValues(calories="350 kcal", fat="12 g", carbs="48 g", protein="9 g")

    dynamodb_service.store_nutritional_information(TEST_RECIPE_ID, values)

    info = dynamodb_service.get_recipe(TEST_RECIPE_ID).nutritional_information
    assert info.status == RecipeStatus.SUCCESS
    assert info.calories == "350 kcal"


def test_store_failed_nutritional_information(dynamodb_service, submission):
    dynamodb_service.create_submission(submission)
    dynamodb_service.store_nutritional_information(TEST_RECIPE_ID, None, RecipeStatus.FAILED)

    info = dynamodb_service.get_recipe(TEST_RECIPE_ID).nutritional_information
    assert info.status == RecipeStatus.FAILED
    assert info.protein == ""


def test_get_nonexistent_recipe(dynamodb_service):
    assert dynamodb_service.get_recipe("nonexistent") is None


def test_delete_recipe(dynamodb_service, submission):
    dynamodb_service.create_submission(submission)
    dynamodb_service.delete_recipe(TEST_RECIPE_ID)
    assert dynamodb_service.get_recipe(TEST_RECIPE_ID) is None


def test_delete_nonexistent_recipe(dynamodb_service):
    with pytest.raises(RecipeNotFoundError):
        dynamodb_service.delete_recipe("nonexistent")


def test_get_recipe_read_error_raises_persistence_error(dynamodb_service):
    dynamodb_service.table = Mock(get_item=Mock(side_effect=ClientError(
        {"Error": {"Code": "ProvisionedThroughputExceededException"}}, "GetItem"
    )))

    with pytest.raises(PersistenceError):
        dynamodb_service.get_recipe(TEST_RECIPE_ID)
