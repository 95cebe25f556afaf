# backend/feedr/services/storage_service.py

import logging
import uuid
from typing import Any, Dict, Optional

import boto3

from feedr.core.config import settings
from feedr.services.textract_service import picture_submission_key

logger = logging.getLogger(__name__)


class StorageService:
    """Presigned uploads into the guest photo bucket."""

    def __init__(self, bucket: Optional[str] = None, s3_client: Any = None):
        self.bucket = bucket or settings.GUEST_PHOTO_UPLOAD_BUCKET_NAME
        if not self.bucket:
            raise ValueError("GUEST_PHOTO_UPLOAD_BUCKET_NAME environment variable is not set.")
        self.s3 = s3_client or boto3.client('s3', region_name=settings.AWS_REGION)

    def create_picture_submission(self, content_type: str = "image/jpeg") -> Dict[str, str]:
        picture_submission_uuid = str(uuid.uuid4())
        key = picture_submission_key(picture_submission_uuid)
        upload_url = self.s3.generate_presigned_url(
            'put_object',
            Params={'Bucket': self.bucket, 'Key': key, 'ContentType': content_type},
            ExpiresIn=settings.PRESIGNED_URL_EXPIRY
        )
        logger.info("Created upload URL for %s", key)
        return {
            "pictureSubmissionUUID": picture_submission_uuid,
            "key": key,
            "uploadUrl": upload_url,
        }
