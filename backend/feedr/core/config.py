from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""
    PROJECT_NAME: str = "Feedr API"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"

    # OpenAI settings
    OPENAI_API_KEY: str
    SUMMARY_MODEL: str = "gpt-4o"
    SUMMARY_TEMPERATURE: float = 0.5
    CHAT_MODEL: str = "gpt-4o-2024-08-06"
    CHAT_MODEL_TEMPERATURE: float = 0.0
    # Shorter text cannot hold a usable recipe
    MIN_RECIPE_TEXT_LENGTH: int = 100

    # AWS Settings
    AWS_REGION: str = "us-west-2"
    # AWS credentials - optional if using IAM roles or aws configure
    AWS_ACCESS_KEY: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    # DynamoDB settings
    RECIPE_TABLE_NAME: str = "Recipe"
    DYNAMODB_ENDPOINT_URL: Optional[str] = None  # Set for local testing

    # S3 / Textract settings
    GUEST_PHOTO_UPLOAD_BUCKET_NAME: Optional[str] = None
    PICTURE_SUBMISSION_PREFIX: str = "picture-submissions"
    S3_FETCH_MAX_ATTEMPTS: int = 6
    S3_FETCH_RETRY_DELAY: float = 2.0
    PRESIGNED_URL_EXPIRY: int = 900

    # Web fetch settings
    HTTP_TIMEOUT: float = 15.0
    HTTP_USER_AGENT: str = "Mozilla/5.0"

    # Step Functions
    PROCESS_RECIPE_STATE_MACHINE_ARN: Optional[str] = None

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
