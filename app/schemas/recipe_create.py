from pydantic import ConfigDict, Field

from .recipe_base import RecipeBase
from .ingredient import IngredientCreate


class RecipeCreate(RecipeBase):
    model_config = ConfigDict(extra="forbid")

    ingredients: list[IngredientCreate] = Field(default_factory=list)
