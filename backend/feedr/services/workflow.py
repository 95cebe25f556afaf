# backend/feedr/services/workflow.py

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from feedr.core.exceptions import FeedrError, InputValidationError, PersistenceError
from feedr.core.schemas import ExtractedRecipe, Language, RecipeStatus, RecipeSubmission
from feedr.services.dynamodb_service import DynamoDBService
from feedr.services.langchain_service import LangChainService
from feedr.services.scraper_service import ScraperService
from feedr.services.textract_service import TextractService

logger = logging.getLogger(__name__)


class WorkflowStage(str, Enum):
    RECEIVED = "RECEIVED"
    ACQUIRING_TEXT = "ACQUIRING_TEXT"
    SUMMARIZING = "SUMMARIZING"
    STRUCTURING = "STRUCTURING"
    STORED = "STORED"
    FAILED = "FAILED"


class WorkflowResult(BaseModel):
    recipe_id: str
    stages: List[WorkflowStage] = Field(default_factory=list)
    recipe: Optional[ExtractedRecipe] = None
    nutrition_status: Optional[RecipeStatus] = None


def build_workflow_input(submission: RecipeSubmission) -> Dict[str, str]:
    """
    Build the state machine input for a submission.

    A non-empty url takes precedence over a picture submission.

    Raises:
        InputValidationError: If the id is missing, or both url and picture are.
    """
    if not submission.id:
        raise InputValidationError("Missing 'id' in submission.")

    workflow_input = {"id": submission.id, "language": Language(submission.language).value}
    if submission.url:
        workflow_input["url"] = submission.url
    elif submission.picture_submission_uuid:
        workflow_input["pictureSubmissionUUID"] = submission.picture_submission_uuid
    else:
        raise InputValidationError(
            f"Submission {submission.id} has neither a url nor a pictureSubmissionUUID."
        )
    return workflow_input


def submission_from_stream_image(new_image: Dict[str, Any]) -> RecipeSubmission:
    """Read a RecipeSubmission from a DynamoDB stream NewImage."""
    def string(name: str) -> Optional[str]:
        return (new_image.get(name) or {}).get("S")

    fields = {
        "id": string("id"),
        "url": string("url"),
        "pictureSubmissionUUID": string("pictureSubmissionUUID"),
        "language": string("language") or Language.EN.value,
    }
    if string("createdAt"):
        fields["createdAt"] = string("createdAt")
    try:
        return RecipeSubmission.model_validate(fields)
    except ValueError as e:
        raise InputValidationError(f"Invalid submission record: {e}") from e


class RecipeExtractionWorkflow:
    """
    Run the extraction stages in-process.

    The deployed pipeline runs the same stages as separate Lambda tasks under
    Step Functions; this driver is used for local runs and backfills.
    """

    def __init__(
        self,
        dynamodb: Optional[DynamoDBService] = None,
        langchain: Optional[LangChainService] = None,
        scraper: Optional[ScraperService] = None,
        textract: Optional[TextractService] = None,
    ):
        self.dynamodb = dynamodb or DynamoDBService()
        self.langchain = langchain or LangChainService()
        self.scraper = scraper or ScraperService()
        self._textract = textract

    @property
    def textract(self) -> TextractService:
        # Only photo submissions need the upload bucket configured
        if self._textract is None:
            self._textract = TextractService()
        return self._textract

    def acquire_text(self, workflow_input: Dict[str, str]) -> str:
        if workflow_input.get("url"):
            return self.scraper.extract_text_from_url(workflow_input["url"])
        return self.textract.extract_text_from_image(workflow_input["pictureSubmissionUUID"])

    async def run(self, submission: RecipeSubmission, enrich: bool = True) -> WorkflowResult:
        workflow_input = build_workflow_input(submission)
        result = WorkflowResult(recipe_id=submission.id)

        def advance(stage: WorkflowStage):
            result.stages.append(stage)
            logger.info("Recipe %s: %s", submission.id, stage.value)

        advance(WorkflowStage.RECEIVED)
        try:
            advance(WorkflowStage.ACQUIRING_TEXT)
            text = self.acquire_text(workflow_input)

            advance(WorkflowStage.SUMMARIZING)
            summary = await self.langchain.summarize_recipe_text(text)

            advance(WorkflowStage.STRUCTURING)
            recipe = await self.langchain.structure_recipe(summary, submission.language)

            self.dynamodb.store_extracted_recipe(submission.id, recipe)
            advance(WorkflowStage.STORED)
            result.recipe = recipe
        except FeedrError as e:
            advance(WorkflowStage.FAILED)
            logger.error("Recipe %s failed: %s", submission.id, e)
            try:
                self.dynamodb.mark_failure(submission.id)
            except PersistenceError as mark_error:
                logger.error("Error marking recipe %s as FAILED: %s", submission.id, mark_error)
            raise

        if enrich:
            result.nutrition_status = await self.enrich(submission.id, recipe)
        return result

    async def enrich(self, recipe_id: str, recipe: ExtractedRecipe) -> RecipeStatus:
        """Attach nutrition; a failure here never fails the stored recipe."""
        try:
            values = await self.langchain.generate_nutritional_information(
                recipe.ingredients, recipe.servings
            )
        except FeedrError as e:
            logger.warning("Nutritional information unavailable for %s: %s", recipe_id, e)
            self.dynamodb.store_nutritional_information(recipe_id, None, RecipeStatus.FAILED)
            return RecipeStatus.FAILED

        self.dynamodb.store_nutritional_information(recipe_id, values)
        return RecipeStatus.SUCCESS
