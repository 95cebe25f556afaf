# backend/feedr/services/langchain_service.py

import logging
from typing import List, Optional

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI

from feedr.core.config import settings
from feedr.core.exceptions import ExtractionError
from feedr.core.schemas import ExtractedRecipe, Ingredient, Language, NutritionalValues

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {
    Language.EN: "English",
    Language.ES: "Spanish",
    Language.FR: "French",
}

SUMMARY_PROMPT = ChatPromptTemplate.from_messages([
    ("system", (
        "Summarize the following text to extract key details about a recipe, including "
        "ingredient quantities and units, the number of servings, and preparation and "
        "cooking times. Keep the steps in order and retain major points about technique "
        "and timing. Ignore navigation, advertising, comments and anything else that is "
        "not part of the recipe."
    )),
    ("user", "{text}"),
])

STRUCTURE_PROMPT = ChatPromptTemplate.from_messages([
    ("system", (
        "You are a recipe extraction assistant. Read the recipe summary and extract the "
        "title, ingredients, ordered instructions, prep time, cook time and servings.\n\n"
        "Formatting guidelines for ingredients:\n"
        "1. Quantity: a number, fraction or mixed fraction written as a string, for "
        "example \"2\", \"1.5\", \"3/4\" or \"1 1/2\". Use null when there is no quantity.\n"
        "2. Unit: use singular standard names such as \"cup\", \"tablespoon\", "
        "\"teaspoon\", \"gram\" or \"kilogram\". Use \"each\" for countable items and "
        "null when there is no unit.\n"
        "3. Use null for prep time, cook time or servings that the text does not give.\n"
        "4. Language: return all output in {language}."
    )),
    ("user", "{summary}"),
])

NUTRITION_PROMPT = ChatPromptTemplate.from_messages([
    ("system", (
        "You are a helpful assistant that provides nutritional information based on "
        "given ingredients and serving size."
    )),
    ("user", (
        "Given the following ingredients: {ingredients}, and that the recipe serves "
        "{servings}, provide the nutritional information per serving with the keys "
        "calories, fat, carbs and protein, all as strings."
    )),
])


def format_ingredients(ingredients: List[Ingredient]) -> str:
    """Render ingredients as "2 cup flour, 1 each egg"."""
    return ", ".join(
        " ".join(part for part in (ing.quantity, ing.unit, ing.name) if part)
        for ing in ingredients
    )


class LangChainService:
    def __init__(self, api_key: Optional[str] = None):
        """Initialize LangChain components."""
        api_key = api_key or settings.OPENAI_API_KEY

        self.summary_chat = ChatOpenAI(
            model=settings.SUMMARY_MODEL,
            temperature=settings.SUMMARY_TEMPERATURE,
            openai_api_key=api_key
        )
        self.chat = ChatOpenAI(
            model=settings.CHAT_MODEL,
            temperature=settings.CHAT_MODEL_TEMPERATURE,
            openai_api_key=api_key
        )

        self.summary_chain = SUMMARY_PROMPT | self.summary_chat | StrOutputParser()
        # json_schema mode makes the API enforce the schema
        self.structure_chain = STRUCTURE_PROMPT | self.chat.with_structured_output(
            ExtractedRecipe, method="json_schema"
        )
        self.nutrition_chain = NUTRITION_PROMPT | self.chat.with_structured_output(
            NutritionalValues, method="json_schema"
        )

    async def summarize_recipe_text(self, text: str) -> str:
        """Condense raw page or OCR text down to the recipe facts."""
        text = (text or "").strip()
        if len(text) < settings.MIN_RECIPE_TEXT_LENGTH:
            logger.error("Extracted text is too short for a valid recipe: %d characters.", len(text))
            raise ExtractionError("Insufficient content to generate a recipe.")

        logger.info("Summarizing %d characters of recipe text", len(text))
        try:
            summary = await self.summary_chain.ainvoke({"text": text})
        except Exception as e:
            logger.error("Error summarizing recipe text: %s", e)
            raise ExtractionError(f"Failed to summarize recipe text: {e}") from e

        if not summary or not summary.strip():
            raise ExtractionError("The language model returned an empty summary.")
        return summary.strip()

    async def structure_recipe(self, summary: str, language: Language = Language.EN) -> ExtractedRecipe:
        """Convert a summary into an ExtractedRecipe constrained by its JSON schema."""
        if not summary:
            raise ExtractionError("Missing summary for recipe structuring.")

        try:
            recipe = await self.structure_chain.ainvoke({
                "summary": summary,
                "language": LANGUAGE_NAMES[Language(language)],
            })
        except Exception as e:
            logger.error("Error generating recipe: %s", e)
            raise ExtractionError(f"Failed to generate recipe: {e}") from e

        if recipe is None:
            raise ExtractionError("The language model returned no structured recipe.")
        if not recipe.ingredients or not recipe.instructions:
            raise ExtractionError(f"Structured recipe '{recipe.title}' has no ingredients or instructions.")
        return recipe

    async def extract_recipe(self, text: str, language: Language = Language.EN) -> ExtractedRecipe:
        summary = await self.summarize_recipe_text(text)
        return await self.structure_recipe(summary, language)

    async def generate_nutritional_information(
        self, ingredients: List[Ingredient], servings: Optional[str]
    ) -> NutritionalValues:
        if not ingredients:
            raise ExtractionError("No ingredients provided.")
        if not servings:
            raise ExtractionError("Missing 'servings' in processed recipe.")

        try:
            values = await self.nutrition_chain.ainvoke({
                "ingredients": format_ingredients(ingredients),
                "servings": servings,
            })
        except Exception as e:
            logger.error("Error generating nutritional information: %s", e)
            raise ExtractionError(f"Failed to generate nutritional information: {e}") from e

        if values is None:
            raise ExtractionError("The language model returned no nutritional information.")
        return values
