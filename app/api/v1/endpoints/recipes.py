from typing import Any, Sequence

from fastapi import APIRouter, Body, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import MethodNotAllowedError
from app.db.session import get_db
from app.schemas import Recipe, RecipeCreate, RecipeId, RecipeList
from app.services import recipe_service

COLLECTION_METHODS = ("GET", "POST")
ITEM_METHODS = ("GET", "PATCH", "DELETE")

router = APIRouter()


def _method_not_allowed(allowed_methods: Sequence[str]):
    async def reject(request: Request) -> Response:
        raise MethodNotAllowedError(request.method, allowed_methods)

    return reject


def _add_method_guard(path: str, allowed_methods: Sequence[str]) -> None:
    # plain route without a method list: matches every verb the real routes above do not
    router.add_route(path, _method_not_allowed(allowed_methods), include_in_schema=False)


@router.get("", response_model=RecipeList)
async def read_recipes(*, db: AsyncSession = Depends(get_db)) -> Any:
    recipes = await recipe_service.get_all_recipes(db=db)
    return {"items": recipes, "count": len(recipes)}

@router.post("", response_model=RecipeId, status_code=201)
async def create_new_recipe(*, db: AsyncSession = Depends(get_db), recipe_in: RecipeCreate) -> Any:
    recipe_id = await recipe_service.create_recipe(db=db, recipe_in=recipe_in)
    return {"id": recipe_id}

@router.get("/{recipe_id}", response_model=Recipe)
async def read_recipe_by_id(*, db: AsyncSession = Depends(get_db), recipe_id: int) -> Any:
    return await recipe_service.get_recipe_by_id(db=db, recipe_id=recipe_id)

@router.patch("/{recipe_id}", response_model=RecipeId)
async def update_existing_recipe(
    *, db: AsyncSession = Depends(get_db), recipe_id: int, update_data: dict[str, Any] = Body(...)
) -> Any:
    # validated by the service once the recipe is known to exist
    updated_id = await recipe_service.update_recipe(db=db, recipe_id=recipe_id, update_data=update_data)
    return {"id": updated_id}

@router.delete("/{recipe_id}", status_code=204, response_class=Response)
async def delete_existing_recipe(*, db: AsyncSession = Depends(get_db), recipe_id: int) -> Response:
    # deleting an unknown id is not an error
    await recipe_service.delete_recipe(db=db, recipe_id=recipe_id)
    return Response(status_code=204)


_add_method_guard("", COLLECTION_METHODS)
_add_method_guard("/{recipe_id}", ITEM_METHODS)
