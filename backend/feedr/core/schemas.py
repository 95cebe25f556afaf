from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Language(str, Enum):
    """Output languages a submission can request."""
    EN = "en"
    ES = "es"
    FR = "fr"


class RecipeStatus(str, Enum):
    """Processing status stored on a Recipe item."""
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class Ingredient(BaseModel):
    """Schema for recipe ingredients."""
    name: str = Field(..., description="Name of the ingredient")
    quantity: Optional[str] = Field(..., description="Quantity as written, e.g. '1 1/2' or '½'")
    unit: Optional[str] = Field(..., description="Unit of measurement")


class ExtractedRecipe(BaseModel):
    """Structured recipe returned by the language model."""
    title: str = Field(..., description="Recipe title")
    ingredients: List[Ingredient] = Field(..., description="List of ingredients")
    instructions: List[str] = Field(..., description="Ordered instruction steps")
    prep_time: Optional[str] = Field(..., description="Preparation time")
    cook_time: Optional[str] = Field(..., description="Cooking time")
    servings: Optional[str] = Field(..., description="Number of servings")


class NutritionalValues(BaseModel):
    """Per-serving nutrition returned by the language model."""
    calories: str = Field(..., description="Calories per serving")
    fat: str = Field(..., description="Fat per serving")
    carbs: str = Field(..., description="Carbohydrates per serving")
    protein: str = Field(..., description="Protein per serving")


class NutritionalInformation(NutritionalValues):
    status: RecipeStatus = RecipeStatus.PENDING


class RecipeSubmission(BaseModel):
    """The fields of an inserted Recipe item that drive extraction."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    url: Optional[str] = None
    picture_submission_uuid: Optional[str] = Field(None, alias="pictureSubmissionUUID")
    language: Language = Language.EN
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="createdAt",
    )


class Recipe(BaseModel):
    """Schema for a stored Recipe item."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    url: Optional[str] = None
    picture_submission_uuid: Optional[str] = Field(None, alias="pictureSubmissionUUID")
    language: Language = Language.EN
    status: RecipeStatus = RecipeStatus.PENDING
    title: Optional[str] = None
    description: Optional[str] = None
    ingredients: List[Ingredient] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    servings: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    nutritional_information: Optional[NutritionalInformation] = Field(
        None, alias="nutritionalInformation"
    )
    owners: List[str] = Field(default_factory=list)
    created_by: Optional[str] = Field(None, alias="createdBy")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class RecipeCreateRequest(BaseModel):
    """Body of a new submission from the client."""
    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = None
    picture_submission_uuid: Optional[str] = Field(None, alias="pictureSubmissionUUID")
    language: Language = Language.EN


class ScaleRequest(BaseModel):
    multiplier: Union[int, float, str] = Field(..., description="Positive rational, e.g. 2, 1.5 or '3/2'")


class ScaleIngredientsRequest(ScaleRequest):
    ingredients: List[Ingredient]


class ScaleResponse(BaseModel):
    multiplier: str
    ingredients: List[Ingredient]


class PictureSubmissionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    picture_submission_uuid: str = Field(..., alias="pictureSubmissionUUID")
    key: str
    upload_url: str = Field(..., alias="uploadUrl")
