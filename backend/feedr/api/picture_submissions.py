# backend/feedr/api/picture_submissions.py

from fastapi import APIRouter, Depends, HTTPException, Query

from feedr.core.schemas import PictureSubmissionResponse
from feedr.services.storage_service import StorageService

router = APIRouter()

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp", "image/heic"}


def get_storage_service() -> StorageService:
    """Dependency to get StorageService instance."""
    return StorageService()


@router.post("/", response_model=PictureSubmissionResponse, status_code=201)
async def create_picture_submission(
    content_type: str = Query("image/jpeg"),
    storage: StorageService = Depends(get_storage_service)
):
    """Reserve a pictureSubmissionUUID and return a presigned upload URL for it."""
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(status_code=415, detail=f"Unsupported content type: {content_type}")
    return storage.create_picture_submission(content_type)
