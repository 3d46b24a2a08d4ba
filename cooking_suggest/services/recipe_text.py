# cooking_suggest/services/recipe_text.py
from __future__ import annotations

import re
from typing import List, Optional, Sequence

from cooking_suggest.core.text import clean_value, drop_parenthetical, strip_emphasis
from cooking_suggest.models.recipe import ParsedRecipe

DEFAULT_TITLE = "Creative Recipe"
DEFAULT_COOKING_TIME = "30 minutes"
DEFAULT_SERVINGS = "2-4"
DEFAULT_DIFFICULTY = "Medium"

# Lines after INSTRUCTIONS: containing any of these are metadata, not steps
METADATA_KEYWORDS = ("cooking_time", "servings", "difficulty")

_BULLET = re.compile(r"^(?:-|•|\*(?!\*))\s*")
_NUMBERING = re.compile(r"^\d+[.)]\s*")


def _non_blank_lines(text: str) -> List[str]:
    return [ln for ln in (text or "").splitlines() if ln.strip()]


def _find_index(lines: Sequence[str], needle: str) -> int:
    for i, ln in enumerate(lines):
        if needle in ln.lower():
            return i
    return -1


def _labelled_value(lines: Sequence[str], label: str) -> Optional[str]:
    """
    Value of the first line mentioning `label:`, or None.
    Everything up to the last `label:` on that line is discarded.
    """
    idx = _find_index(lines, f"{label}:")
    if idx < 0:
        return None
    value = re.sub(rf"^.*{re.escape(label)}:\s*", "", lines[idx], flags=re.IGNORECASE)
    return clean_value(value) or None


def _ingredient_block(lines: Sequence[str], start: int, end: int) -> List[str]:
    items: List[str] = []
    for ln in lines[start + 1:end]:
        stripped = ln.strip()
        if not _BULLET.match(stripped):
            continue
        item = _BULLET.sub("", stripped, count=1).strip()
        if item:
            items.append(item)
    return items


def _instruction_steps(lines: Sequence[str], start: int) -> List[str]:
    steps: List[str] = []
    for ln in lines[start + 1:]:
        lowered = ln.lower()
        if any(k in lowered for k in METADATA_KEYWORDS):
            continue
        step = strip_emphasis(_NUMBERING.sub("", ln.strip(), count=1))
        if step:
            steps.append(step)
    return steps


def parse_recipe_text(text: str, ingredients: Sequence[str]) -> ParsedRecipe:
    """
    Best-effort scrape of the labelled recipe layout the prompt asks for.

    Never raises: every field the reply does not supply keeps its default,
    ingredients fall back to the requested list and instructions fall back
    to the raw reply.
    """
    lines = _non_blank_lines(text)

    title = _labelled_value(lines, "title") or DEFAULT_TITLE
    description = _labelled_value(lines, "description") or ""
    cooking_time = _labelled_value(lines, "cooking_time")
    cooking_time = drop_parenthetical(cooking_time) if cooking_time else ""
    servings = _labelled_value(lines, "servings") or DEFAULT_SERVINGS
    difficulty = _labelled_value(lines, "difficulty") or DEFAULT_DIFFICULTY

    parsed_ingredients = list(ingredients)
    ingredients_idx = _find_index(lines, "ingredients:")
    instructions_idx = _find_index(lines, "instructions:")

    if ingredients_idx != -1 and instructions_idx != -1:
        block = _ingredient_block(lines, ingredients_idx, instructions_idx)
        if block:
            parsed_ingredients = block

    instructions = ""
    if instructions_idx != -1:
        instructions = "\n".join(_instruction_steps(lines, instructions_idx))

    if not instructions:
        instructions = text

    return ParsedRecipe(
        title=title,
        description=description,
        ingredients=parsed_ingredients,
        instructions=instructions,
        cooking_time=cooking_time or DEFAULT_COOKING_TIME,
        servings=servings,
        difficulty=difficulty,
    )
