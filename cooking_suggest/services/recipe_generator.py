# cooking_suggest/services/recipe_generator.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

from fastapi import HTTPException

from cooking_suggest.core import config
from cooking_suggest.models.recipe import Recipe, RecipeCreate
from cooking_suggest.services.recipe_text import parse_recipe_text
from cooking_suggest.services.storage import RecipeStore

log = logging.getLogger("cooking_suggest.generator")

RECIPE_LAYOUT = """Please provide a response in this exact format:

TITLE: [Creative recipe name]

DESCRIPTION: [Brief description of the dish]

INGREDIENTS:
- [Ingredient 1 with measurement]
- [Ingredient 2 with measurement]
- [Continue for all needed ingredients]

INSTRUCTIONS:
1. [Detailed step 1]
2. [Detailed step 2]
3. [Continue with all cooking steps]

COOKING_TIME: [Total time needed]
SERVINGS: [Number of servings]
DIFFICULTY: [Easy/Medium/Hard]

Make it creative, detailed, and delicious!"""


def normalize_ingredients(ingredients: Any) -> List[str]:
    if not ingredients or not isinstance(ingredients, (list, tuple)):
        return []
    return [str(i).strip() for i in ingredients if i is not None and str(i).strip()]


def build_prompt(ingredients: Sequence[str]) -> str:
    return (
        f"Create a detailed and creative recipe using these ingredients: {', '.join(ingredients)}.\n\n"
        f"{RECIPE_LAYOUT}"
    )


async def generate_recipe(
    *,
    ingredients: Any,
    user_id: Optional[int],
    llm_client: Any,
    store: RecipeStore,
) -> Recipe:
    items = normalize_ingredients(ingredients)
    if not items:
        raise HTTPException(status_code=400, detail="Please provide ingredients")

    log.info("generating recipe", extra={"ingredients": items, "user_id": user_id})

    try:
        reply = await llm_client.chat(
            [{"role": "user", "content": build_prompt(items)}],
            temperature=config.LLM_TEMPERATURE,
            max_tokens=config.LLM_MAX_TOKENS,
            timeout_s=config.LLM_TIMEOUT_S,
        )
    except Exception as e:
        log.error("recipe generation failed", extra={"error": str(e)})
        raise HTTPException(status_code=502, detail=f"Failed to generate recipe: {e}")

    if not reply or not reply.strip():
        log.error("recipe generation failed", extra={"error": "empty model output"})
        raise HTTPException(status_code=502, detail="Failed to generate recipe: empty model output")

    parsed = parse_recipe_text(reply, items)
    draft = RecipeCreate(
        **parsed.model_dump(),
        user_id=user_id,
        created_at=datetime.now(timezone.utc),
    )

    recipe = store.insert_recipe(draft)
    log.info(
        "recipe generated",
        extra={
            "recipe_id": recipe.id,
            "title": recipe.title,
            "cooking_time": recipe.cooking_time,
            "servings": recipe.servings,
            "difficulty": recipe.difficulty,
        },
    )
    return recipe
