from .base import Base
from .recipe import Recipe
from .ingredient import Ingredient

__all__ = [
    "Base",
    "Recipe",
    "Ingredient"
]
