from unittest.mock import AsyncMock, Mock

import pytest

from conftest import RECIPE_PAGE_TEXT
from feedr.core.exceptions import ExtractionError
from feedr.core.schemas import ExtractedRecipe, Ingredient, Language, NutritionalValues
from feedr.services.langchain_service import (
    STRUCTURE_PROMPT,
    LangChainService,
    format_ingredients,
)


@pytest.fixture
def langchain_service():
    """LangChainService with its chains replaced by async mocks."""
    service = LangChainService(api_key="test-key")
    service.summary_chain = Mock(ainvoke=AsyncMock(return_value="  Pancakes: flour, milk, egg. Whisk, cook.  "))
    service.structure_chain = Mock(ainvoke=AsyncMock())
    service.nutrition_chain = Mock(ainvoke=AsyncMock())
    return service


@pytest.mark.asyncio
async def test_summarize_recipe_text(langchain_service):
    summary = await langchain_service.summarize_recipe_text(RECIPE_PAGE_TEXT)

    assert summary == "Pancakes: flour, milk, egg. Whisk, cook."
    langchain_service.summary_chain.ainvoke.assert_awaited_once_with({"text": RECIPE_PAGE_TEXT})


@pytest.mark.asyncio
async def test_short_text_is_rejected_before_any_call(langchain_service):
    with pytest.raises(ExtractionError, match="Insufficient content"):
        await langchain_service.summarize_recipe_text("Pancakes. Flour.")
    langchain_service.summary_chain.ainvoke.assert_not_awaited()


@pytest.mark.asyncio
async def test_summary_failure_raises_extraction_error(langchain_service):
    langchain_service.summary_chain.ainvoke.side_effect = RuntimeError("rate limited")

    with pytest.raises(ExtractionError, match="rate limited"):
        await langchain_service.summarize_recipe_text(RECIPE_PAGE_TEXT)


@pytest.mark.asyncio
async def test_empty_summary_raises_extraction_error(langchain_service):
    langchain_service.summary_chain.ainvoke.return_value = "   "

    with pytest.raises(ExtractionError):
        await langchain_service.summarize_recipe_text(RECIPE_PAGE_TEXT)


@pytest.mark.asyncio
async def test_structure_recipe(langchain_service, test_recipe):
    langchain_service.structure_chain.ainvoke.return_value = test_recipe

    recipe = await langchain_service.structure_recipe("Pancakes summary", Language.ES)

    assert recipe == test_recipe
    langchain_service.structure_chain.ainvoke.assert_awaited_once_with(
        {"summary": "Pancakes summary", "language": "Spanish"}
    )


@pytest.mark.asyncio
async def test_structure_recipe_without_ingredients_fails(langchain_service):
    langchain_service.structure_chain.ainvoke.return_value = ExtractedRecipe(
        title="Nothing", ingredients=[], instructions=["Wait"],
        prep_time=None, cook_time=None, servings=None,
    )

    with pytest.raises(ExtractionError):
        await langchain_service.structure_recipe("summary")


@pytest.mark.asyncio
async def test_structure_recipe_parse_failure(langchain_service):
    langchain_service.structure_chain.ainvoke.side_effect = ValueError("Invalid JSON")

    with pytest.raises(ExtractionError, match="Invalid JSON"):
        await langchain_service.structure_recipe("summary")


@pytest.mark.asyncio
async def test_extract_recipe_runs_both_calls_in_order(langchain_service, test_recipe):
    langchain_service.structure_chain.ainvoke.return_value = test_recipe

    recipe = await langchain_service.extract_recipe(RECIPE_PAGE_TEXT, Language.FR)

    assert recipe.title == "Classic Pancakes"
    structure_input = langchain_service.structure_chain.ainvoke.await_args.args[0]
    assert structure_input == {"summary": "Pancakes: flour, milk, egg. Whisk, cook.", "language": "French"}


@pytest.mark.asyncio
async def test_generate_nutritional_information(langchain_service, test_recipe):
    values = NutritionalValues(calories="220", fat="6 g", carbs="33 g", protein="8 g")
    langchain_service.nutrition_chain.ainvoke.return_value = values

    result = await langchain_service.generate_nutritional_information(test_recipe.ingredients, "4")

    assert result == values
    call = langchain_service.nutrition_chain.ainvoke.await_args.args[0]
    assert call["servings"] == "4"
    assert call["ingredients"].startswith("1 ½ cup all-purpose flour, 1 1/4 cup milk")


@pytest.mark.asyncio
async def test_nutrition_requires_servings(langchain_service, test_recipe):
    with pytest.raises(ExtractionError, match="servings"):
        await langchain_service.generate_nutritional_information(test_recipe.ingredients, None)


def test_format_ingredients_skips_missing_parts():
    text = format_ingredients([
        Ingredient(name="egg", quantity="2", unit="each"),
        Ingredient(name="salt", quantity=None, unit=None),
    ])
    assert text == "2 each egg, salt"


def test_structure_prompt_asks_for_target_language():
    messages = STRUCTURE_PROMPT.format_messages(summary="s", language="Spanish")
    assert "return all output in Spanish" in messages[0].content
