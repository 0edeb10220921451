from .recipe_base import RecipeBase
from .recipe_create import RecipeCreate
from .recipe_update import RecipeUpdate
from .recipe import Recipe, RecipeId, RecipeList, RecipeSummary
from .ingredient import Ingredient, IngredientCreate, IngredientUpdate

__all__ = [
    "RecipeBase",
    "RecipeCreate",
    "RecipeUpdate",
    "Recipe",
    "RecipeId",
    "RecipeList",
    "RecipeSummary",
    "Ingredient",
    "IngredientCreate",
    "IngredientUpdate"
]
