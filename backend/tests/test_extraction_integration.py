import pytest
from dotenv import dotenv_values

from conftest import RECIPE_PAGE_TEXT
from feedr.core.schemas import Language
from feedr.services.langchain_service import LangChainService

# Live OpenAI calls; only run with a key in the local .env file
OPENAI_API_KEY = dotenv_values().get("OPENAI_API_KEY")

pytestmark = pytest.mark.skipif(not OPENAI_API_KEY, reason="OPENAI_API_KEY not set in .env")


@pytest.fixture
def langchain_service():
    return LangChainService(api_key=OPENAI_API_KEY)


@pytest.mark.asyncio
async def test_extract_recipe_from_page_text(langchain_service):
    recipe = await langchain_service.extract_recipe(RECIPE_PAGE_TEXT)

    print(f"\nExtracted: {recipe.title}")
    for ingredient in recipe.ingredients:
        print(f"  {ingredient.quantity} {ingredient.unit} {ingredient.name}")

    assert "pancake" in recipe.title.lower()
    assert len(recipe.ingredients) >= 3
    assert recipe.instructions
    flour = next(i for i in recipe.ingredients if "flour" in i.name.lower())
    assert flour.quantity in ("1 1/2", "1.5", "1 ½")


@pytest.mark.asyncio
async def test_extract_recipe_in_spanish(langchain_service):
    recipe = await langchain_service.extract_recipe(RECIPE_PAGE_TEXT, Language.ES)

    names = " ".join(i.name.lower() for i in recipe.ingredients)
    assert "harina" in names


@pytest.mark.asyncio
async def test_nutritional_information(langchain_service, test_recipe):
    values = await langchain_service.generate_nutritional_information(
        test_recipe.ingredients, test_recipe.servings
    )

    assert values.calories
    assert values.protein
