# backend/feedr/lambdas/start_recipe_processing.py

import logging

from botocore.exceptions import BotoCoreError, ClientError

from feedr.core.exceptions import InputValidationError
from feedr.core.logging import configure_logging
from feedr.services.stepfunctions_service import StepFunctionsService
from feedr.services.workflow import build_workflow_input, submission_from_stream_image

configure_logging()
logger = logging.getLogger(__name__)


def handler(event, context):
    """
    Start an extraction run for every Recipe inserted into the table.

    Records without an id or without both inputs are skipped. Records whose
    execution could not be started are returned as batch item failures so the
    stream retries only those.
    """
    records = event.get("Records", [])
    step_functions = None
    failures = []

    for record in records:
        logger.info("Processing record: %s (%s)", record.get("eventID"), record.get("eventName"))
        if record.get("eventName") != "INSERT":
            continue

        new_image = (record.get("dynamodb") or {}).get("NewImage")
        if not new_image:
            logger.warning("Skipping record with no NewImage")
            continue

        try:
            workflow_input = build_workflow_input(submission_from_stream_image(new_image))
        except InputValidationError as e:
            logger.warning("Skipping record %s: %s", record.get("eventID"), e)
            continue

        if step_functions is None:
            step_functions = StepFunctionsService()
        try:
            step_functions.start_execution(workflow_input)
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to start Step Function for %s: %s", workflow_input["id"], e)
            failures.append({"itemIdentifier": (record.get("dynamodb") or {}).get("SequenceNumber")})

    logger.info("Successfully processed %d records.", len(records) - len(failures))
    return {"batchItemFailures": failures}
