from pydantic import Field

from .recipe_base import RecipeBase
from .ingredient import IngredientUpdate


class RecipeUpdate(RecipeBase):
    title: str | None = Field(None, min_length=1, max_length=255)
    author: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    prep_time: int | None = Field(None, ge=0, strict=True)
    cooking_time: int | None = Field(None, ge=0, strict=True)
    servings: int | None = Field(None, ge=0, strict=True)
    ingredients: list[IngredientUpdate] | None = None
