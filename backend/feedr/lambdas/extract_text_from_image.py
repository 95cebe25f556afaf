# backend/feedr/lambdas/extract_text_from_image.py

import logging

from feedr.core.exceptions import InputValidationError
from feedr.core.logging import configure_logging
from feedr.services.textract_service import TextractService

configure_logging()
logger = logging.getLogger(__name__)


def handler(event, context):
    """OCR the uploaded photo and return its text to the state machine."""
    picture_submission_uuid = event.get("pictureSubmissionUUID")
    if not picture_submission_uuid:
        raise InputValidationError("Missing pictureSubmissionUUID in input.")

    logger.info("Extracting text for recipe %s from picture %s", event.get("id"), picture_submission_uuid)
    text = TextractService().extract_text_from_image(picture_submission_uuid)
    return {"extractedText": text}
