# cooking_suggest/routers/recipes.py
from __future__ import annotations

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends

from cooking_suggest.core import config
from cooking_suggest.core.auth import get_llm_client, get_store, optional_identity, require_identity
from cooking_suggest.core.security import Identity
from cooking_suggest.models.recipe import GenerateRecipeRequest, Recipe
from cooking_suggest.services.recipe_generator import generate_recipe
from cooking_suggest.services.storage import RecipeStore

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.post("/generate", response_model=Recipe)
async def recipe_generate(
    req: Optional[GenerateRecipeRequest] = Body(default=None),
    identity: Optional[Identity] = Depends(optional_identity),
    store: RecipeStore = Depends(get_store),
    llm_client: Any = Depends(get_llm_client),
) -> Recipe:
    return await generate_recipe(
        ingredients=req.ingredients if req else None,
        user_id=identity.user_id if identity else None,
        llm_client=llm_client,
        store=store,
    )


@router.get("", response_model=List[Recipe])
def recipe_list(store: RecipeStore = Depends(get_store)) -> List[Recipe]:
    return store.list_recent(config.PUBLIC_RECIPES_LIMIT)


@router.get("/my", response_model=List[Recipe])
def my_recipes(
    identity: Identity = Depends(require_identity),
    store: RecipeStore = Depends(get_store),
) -> List[Recipe]:
    return store.list_by_owner(identity.user_id)
