# cooking_suggest/models/recipe.py
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, Field


class GenerateRecipeRequest(BaseModel):
    # validated by the generator so malformed input gets the same 400
    ingredients: Any = None


class ParsedRecipe(BaseModel):
    title: str
    description: str = ""
    ingredients: List[str] = Field(default_factory=list)
    instructions: str = ""
    cooking_time: str = Field(alias="cookingTime")
    servings: str
    difficulty: str

    model_config = {"populate_by_name": True}


class RecipeCreate(ParsedRecipe):
    user_id: Optional[int] = Field(default=None, alias="userId")
    created_at: datetime = Field(alias="createdAt")


class Recipe(RecipeCreate):
    id: int
