from datetime import datetime

from pydantic import Field

from .base import CamelModel
from .recipe_base import RecipeBase
from .ingredient import Ingredient


class RecipeSummary(RecipeBase):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Recipe(RecipeSummary):
    ingredients: list[Ingredient] = Field(default_factory=list)


class RecipeList(CamelModel):
    items: list[RecipeSummary]
    count: int


class RecipeId(CamelModel):
    id: int
