from pydantic import Field

from .base import CamelModel


class RecipeBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    prep_time: int | None = Field(None, ge=0, strict=True)
    cooking_time: int | None = Field(None, ge=0, strict=True)
    servings: int | None = Field(None, ge=0, strict=True)
