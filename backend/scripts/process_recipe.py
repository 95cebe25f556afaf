# backend/scripts/process_recipe.py

import argparse
import asyncio
import os
import sys
import uuid

# Add the backend directory to the Python path so we can import our app modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from feedr.core.exceptions import FeedrError
from feedr.core.logging import configure_logging
from feedr.core.schemas import Language, RecipeSubmission
from feedr.services.dynamodb_service import DynamoDBService
from feedr.services.workflow import RecipeExtractionWorkflow


async def process_recipe(submission: RecipeSubmission, enrich: bool):
    """Insert the submission if needed, then run every extraction stage locally."""
    dynamodb = DynamoDBService()
    dynamodb.ensure_table_exists()
    if dynamodb.get_recipe(submission.id) is None:
        dynamodb.create_submission(submission)
        print(f"Created recipe {submission.id}")

    workflow = RecipeExtractionWorkflow(dynamodb=dynamodb)
    return await workflow.run(submission, enrich=enrich)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Run the recipe extraction pipeline without Step Functions')
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--url', help='Recipe page to extract')
    source.add_argument('--picture', help='pictureSubmissionUUID of an uploaded photo')
    parser.add_argument('--id', help='Existing recipe id to (re)process')
    parser.add_argument('--language', default=Language.EN.value, choices=[lang.value for lang in Language])
    parser.add_argument('--no-nutrition', action='store_true', help='Skip the nutritional information step')
    args = parser.parse_args()

    configure_logging()
    submission = RecipeSubmission(
        id=args.id or str(uuid.uuid4()),
        url=args.url,
        picture_submission_uuid=args.picture,
        language=args.language,
    )

    try:
        result = asyncio.run(process_recipe(submission, enrich=not args.no_nutrition))
    except FeedrError as e:
        print(f"Recipe {submission.id} failed: {type(e).__name__}: {e}")
        sys.exit(1)

    print("\nProcessing complete!")
    print(f"Stages: {' -> '.join(stage.value for stage in result.stages)}")
    print(f"Title: {result.recipe.title}")
    print(f"Ingredients: {len(result.recipe.ingredients)}, steps: {len(result.recipe.instructions)}")
    if result.nutrition_status:
        print(f"Nutritional information: {result.nutrition_status.value}")
