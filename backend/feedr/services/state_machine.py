# backend/feedr/services/state_machine.py

from typing import Any, Dict

# Lambda task keys expected by build_state_machine_definition
TASK_FUNCTIONS = (
    "extract_text_from_url",
    "extract_text_from_image",
    "summarize_recipe",
    "generate_recipe",
    "generate_nutritional_information",
    "mark_failure",
)

LAMBDA_SERVICE_ERRORS = [
    "Lambda.ServiceException",
    "Lambda.AWSLambdaException",
    "Lambda.SdkClientException",
    "Lambda.TooManyRequestsException",
]

# Match the exception class names raised by the task handlers
ACQUISITION_ERRORS = ["AcquisitionError"]
EXTRACTION_ERRORS = ["ExtractionError"]

RETRY_INTERVAL_SECONDS = 2
RETRY_MAX_ATTEMPTS = 2
RETRY_BACKOFF_RATE = 2.0


def _retry(errors):
    return [{
        "ErrorEquals": errors,
        "IntervalSeconds": RETRY_INTERVAL_SECONDS,
        "MaxAttempts": RETRY_MAX_ATTEMPTS,
        "BackoffRate": RETRY_BACKOFF_RATE,
    }]


def _task(function_arn: str, result_path: str, next_state: str, retry_errors,
          catch_next: str = "Mark Failure", catch_path: str = "$.error") -> Dict[str, Any]:
    return {
        "Type": "Task",
        "Resource": function_arn,
        "ResultPath": result_path,
        "Retry": _retry(retry_errors),
        "Catch": [{
            "ErrorEquals": ["States.ALL"],
            "ResultPath": catch_path,
            "Next": catch_next,
        }],
        "Next": next_state,
    }


def build_state_machine_definition(function_arns: Dict[str, str]) -> Dict[str, Any]:
    """
    Build the Amazon States Language definition of the extraction pipeline.

    Args:
        function_arns: Lambda ARN for every key in TASK_FUNCTIONS.
    """
    missing = [key for key in TASK_FUNCTIONS if not function_arns.get(key)]
    if missing:
        raise ValueError(f"Missing Lambda ARNs for: {', '.join(missing)}")

    acquisition_retry = ACQUISITION_ERRORS + LAMBDA_SERVICE_ERRORS
    extraction_retry = EXTRACTION_ERRORS + LAMBDA_SERVICE_ERRORS

    return {
        "Comment": "Extract a structured recipe from a URL or a photo",
        "StartAt": "Determine Input Type",
        "States": {
            "Determine Input Type": {
                "Type": "Choice",
                "Choices": [
                    {
                        "And": [
                            {"Variable": "$.url", "IsPresent": True},
                            {"Not": {"Variable": "$.url", "StringEquals": ""}},
                        ],
                        "Next": "Extract Text from URL",
                    },
                    {
                        "Variable": "$.pictureSubmissionUUID",
                        "IsPresent": True,
                        "Next": "Extract Text from Image",
                    },
                ],
                "Default": "FailMissingInput",
            },
            "FailMissingInput": {
                "Type": "Fail",
                "Error": "InputValidationError",
                "Cause": "No valid input provided (neither url nor pictureSubmissionUUID)",
            },
            "Extract Text from URL": _task(
                function_arns["extract_text_from_url"], "$.extracted",
                "Summarize Recipe", acquisition_retry,
            ),
            "Extract Text from Image": _task(
                function_arns["extract_text_from_image"], "$.extracted",
                "Summarize Recipe", acquisition_retry,
            ),
            "Summarize Recipe": _task(
                function_arns["summarize_recipe"], "$.summary",
                "Generate Recipe", extraction_retry,
            ),
            "Generate Recipe": _task(
                function_arns["generate_recipe"], "$.result",
                "Generate Nutritional Information", extraction_retry,
            ),
            "Generate Nutritional Information": _task(
                function_arns["generate_nutritional_information"], "$.nutritionalInfo",
                "Recipe Processed", LAMBDA_SERVICE_ERRORS,
                # The recipe is already stored as SUCCESS; nutrition is best effort
                catch_next="Recipe Processed", catch_path="$.nutritionError",
            ),
            "Recipe Processed": {"Type": "Succeed"},
            "Mark Failure": {
                "Type": "Task",
                "Resource": function_arns["mark_failure"],
                "ResultPath": "$.failureResult",
                "Retry": _retry(LAMBDA_SERVICE_ERRORS),
                "Next": "Recipe Processing Failed",
            },
            "Recipe Processing Failed": {
                "Type": "Fail",
                "Error": "RecipeProcessingFailed",
                "Cause": "A recipe extraction step failed; the recipe was marked FAILED",
            },
        },
    }
