# backend/feedr/services/textract_service.py

import logging
import time
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from feedr.core.config import settings
from feedr.core.exceptions import AcquisitionError

logger = logging.getLogger(__name__)


def picture_submission_key(picture_submission_uuid: str) -> str:
    """S3 key under which guests upload recipe photos."""
    return f"{settings.PICTURE_SUBMISSION_PREFIX}/{picture_submission_uuid}"


class TextractService:
    """OCR recipe photos stored in the guest upload bucket."""

    def __init__(
        self,
        bucket: Optional[str] = None,
        s3_client: Any = None,
        textract_client: Any = None,
    ):
        self.bucket = bucket or settings.GUEST_PHOTO_UPLOAD_BUCKET_NAME
        if not self.bucket:
            raise ValueError("GUEST_PHOTO_UPLOAD_BUCKET_NAME environment variable is not set.")
        self.s3 = s3_client or boto3.client('s3', region_name=settings.AWS_REGION)
        self.textract = textract_client or boto3.client('textract', region_name=settings.AWS_REGION)
        self.max_attempts = settings.S3_FETCH_MAX_ATTEMPTS
        self.retry_delay = settings.S3_FETCH_RETRY_DELAY

    def _get_image_bytes(self, key: str) -> bytes:
        """Download the image, waiting for an upload that may still be in flight."""
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = self.s3.get_object(Bucket=self.bucket, Key=key)
                return response['Body'].read()
            except ClientError as e:
                code = e.response['Error']['Code']
                if code == 'NoSuchKey' and attempt < self.max_attempts:
                    logger.warning(
                        "Attempt %d failed with NoSuchKey for %s. Retrying in %.1fs...",
                        attempt, key, self.retry_delay
                    )
                    time.sleep(self.retry_delay)
                    continue
                raise AcquisitionError(f"Failed to retrieve s3://{self.bucket}/{key}: {code}") from e
            except BotoCoreError as e:
                logger.error("S3 request failed for %s: %s", key, e)
                raise AcquisitionError(f"Failed to retrieve s3://{self.bucket}/{key}: {e}") from e
        raise AcquisitionError("Failed to retrieve S3 object after multiple attempts.")

    def extract_text_from_image(self, picture_submission_uuid: str) -> str:
        if not picture_submission_uuid:
            raise AcquisitionError("Missing pictureSubmissionUUID in input.")

        key = picture_submission_key(picture_submission_uuid)
        image_bytes = self._get_image_bytes(key)

        try:
            response = self.textract.detect_document_text(Document={'Bytes': image_bytes})
        except (ClientError, BotoCoreError) as e:
            logger.error("Textract failed for %s: %s", key, e)
            raise AcquisitionError(f"Text detection failed for {key}: {e}") from e

        lines = [
            block['Text']
            for block in response.get('Blocks', [])
            if block.get('BlockType') == 'LINE' and block.get('Text')
        ]
        if not lines:
            raise AcquisitionError("No text was extracted from the image.")

        logger.info("Detected %d lines of text in %s", len(lines), key)
        return " ".join(lines)
