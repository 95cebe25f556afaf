# backend/feedr/services/stepfunctions_service.py

import json
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

from feedr.core.config import settings

logger = logging.getLogger(__name__)


def execution_name(recipe_id: str) -> str:
    # Execution names are unique per state machine, so a replayed stream
    # record cannot start a second run for the same recipe
    return f"recipe-{recipe_id}"[:80]


class StepFunctionsService:
    def __init__(self, state_machine_arn: Optional[str] = None, client: Any = None):
        self.state_machine_arn = state_machine_arn or settings.PROCESS_RECIPE_STATE_MACHINE_ARN
        if not self.state_machine_arn:
            raise ValueError("PROCESS_RECIPE_STATE_MACHINE_ARN environment variable is not set.")
        self.client = client or boto3.client(
            'stepfunctions',
            aws_access_key_id=settings.AWS_ACCESS_KEY,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_REGION
        )

    def start_execution(self, workflow_input: Dict[str, str]) -> Optional[str]:
        """
        Start one extraction run.

        Returns:
            The execution ARN, or None when a run already exists for the recipe.
        """
        try:
            response = self.client.start_execution(
                stateMachineArn=self.state_machine_arn,
                name=execution_name(workflow_input['id']),
                input=json.dumps(workflow_input)
            )
        except ClientError as e:
            if e.response['Error']['Code'] == 'ExecutionAlreadyExists':
                logger.warning("Execution already exists for recipe %s", workflow_input['id'])
                return None
            raise
        logger.info("Step Function started: %s", response['executionArn'])
        return response['executionArn']
