# backend/feedr/main.py

from fastapi import FastAPI
from mangum import Mangum
from fastapi.middleware.cors import CORSMiddleware

from feedr.core.config import settings
from feedr.core.logging import configure_logging
from feedr.api.recipes import router as recipes_router
from feedr.api.picture_submissions import router as picture_submissions_router

configure_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recipes_router, prefix=f"{settings.API_PREFIX}/recipes")
app.include_router(picture_submissions_router, prefix=f"{settings.API_PREFIX}/picture-submissions")

# Handler for AWS Lambda
handler = Mangum(app)

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
