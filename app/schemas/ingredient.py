from pydantic import ConfigDict, Field

from .base import CamelModel


class IngredientCreate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0, strict=True)
    unit: str = Field(..., min_length=1)
    recipe_id: int | None = None


class IngredientUpdate(CamelModel):
    """Ingredient entry of an update request. Entries without a known id are new ingredients."""

    id: int | None = Field(None, strict=True)
    name: str | None = None
    quantity: float | None = Field(None, gt=0, strict=True)
    unit: str | None = None


class Ingredient(CamelModel):
    id: int
    name: str
    recipe_id: int
    quantity: float
    unit: str
