import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Sequence

from pydantic import ValidationError
from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DuplicateRecipeTitleError,
    InvalidIngredientError,
    InvalidRecipeError,
    RecipeNotFoundError,
    UnknownStoreError,
)
from app.core.text_utils import to_camel_case
from app.models import Ingredient, Recipe
from app.schemas import IngredientUpdate, RecipeCreate, RecipeUpdate

logger = logging.getLogger(__name__)

DUPLICATE_ENTRY_SQLSTATE = "23505"
DUPLICATE_ENTRY_MESSAGES = ("duplicate key value", "UNIQUE constraint failed")

# ids outside the INTEGER column range cannot exist
MAX_STORED_ID = 2_147_483_647

RECIPE_FIELDS = ("title", "author", "description", "prep_time", "cooking_time", "servings")
INGREDIENT_COLUMNS = (
    Ingredient.id,
    Ingredient.name,
    Ingredient.recipe_id,
    Ingredient.quantity,
    Ingredient.unit,
)


def _is_duplicate_entry(ex: IntegrityError) -> bool:
    orig = ex.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == DUPLICATE_ENTRY_SQLSTATE:
        return True
    message = str(orig)
    return any(marker in message for marker in DUPLICATE_ENTRY_MESSAGES)


@asynccontextmanager
async def _store_errors(db: AsyncSession, *, title: str | None = None) -> AsyncIterator[None]:
    """
    Roll back the session on any failure and turn database errors into service errors.
    A unique violation is reported as a duplicate title when `title` is given.
    """
    try:
        yield
    except IntegrityError as ex:
        await db.rollback()
        if title is not None and _is_duplicate_entry(ex):
            raise DuplicateRecipeTitleError(title) from ex
        logger.error(f"Integrity error: {ex.orig}")
        raise UnknownStoreError(str(ex.orig)) from ex
    except SQLAlchemyError as ex:
        await db.rollback()
        logger.error(f"Database error: {ex}")
        raise UnknownStoreError(str(ex)) from ex
    except Exception:
        await db.rollback()
        raise


def _is_storable_id(value: int) -> bool:
    return -MAX_STORED_ID - 1 <= value <= MAX_STORED_ID


async def _fetch_recipe(
    db: AsyncSession, recipe_id: int
) -> tuple[Mapping[str, Any], Sequence[Mapping[str, Any]]]:
    if not _is_storable_id(recipe_id):
        raise RecipeNotFoundError(recipe_id)

    recipe_result = await db.execute(select(Recipe.__table__).where(Recipe.id == recipe_id))
    recipe_row = recipe_result.mappings().one_or_none()
    if recipe_row is None:
        raise RecipeNotFoundError(recipe_id)

    ingredients_result = await db.execute(
        select(*INGREDIENT_COLUMNS)
        .where(Ingredient.recipe_id == recipe_id)
        .order_by(Ingredient.id)
    )
    return recipe_row, ingredients_result.mappings().all()


def _parse_update(update_data: Mapping[str, Any]) -> RecipeUpdate:
    try:
        return RecipeUpdate.model_validate(update_data)
    except ValidationError as ex:
        raise InvalidRecipeError() from ex


def _merge_recipe(current: Mapping[str, Any], recipe_in: RecipeUpdate) -> RecipeCreate:
    merged = {field: current[field] for field in RECIPE_FIELDS}
    merged.update(recipe_in.model_dump(exclude_unset=True, exclude={"ingredients"}))
    try:
        return RecipeCreate.model_validate(merged)
    except ValidationError as ex:
        raise InvalidRecipeError() from ex


def _missing_ingredient_fields(ingredient: IngredientUpdate) -> list[str]:
    missing = []
    if not ingredient.name:
        missing.append("name")
    if ingredient.quantity is None:
        missing.append("quantity")
    if not ingredient.unit:
        missing.append("unit")
    return missing


async def _reconcile_ingredients(
    db: AsyncSession,
    *,
    recipe_id: int,
    current: Sequence[Mapping[str, Any]],
    ingredients_in: Sequence[IngredientUpdate],
) -> None:
    """
    Sync the stored ingredients of a recipe with a submitted list.

    Entries whose id matches a stored ingredient update it, keeping stored
    values for omitted fields. Any other entry is a new ingredient and must
    carry name, quantity and unit. Stored ingredients absent from the list
    are deleted once all inserts and updates are done.
    """
    current_by_id = {row["id"]: row for row in current}
    kept_ids = {i.id for i in ingredients_in if i.id in current_by_id}
    omitted_ids = [ingredient_id for ingredient_id in current_by_id if ingredient_id not in kept_ids]

    for ingredient in ingredients_in:
        existing = current_by_id.get(ingredient.id)

        if existing is None:
            missing = _missing_ingredient_fields(ingredient)
            if missing:
                raise InvalidIngredientError(missing)

            await db.execute(
                insert(Ingredient).values(
                    recipe_id=recipe_id,
                    name=ingredient.name,
                    quantity=ingredient.quantity,
                    unit=ingredient.unit,
                )
            )
        else:
            await db.execute(
                update(Ingredient)
                .where(Ingredient.id == ingredient.id)
                .values(
                    name=ingredient.name or existing["name"],
                    quantity=(
                        ingredient.quantity
                        if ingredient.quantity is not None
                        else existing["quantity"]
                    ),
                    unit=ingredient.unit or existing["unit"],
                )
            )

    for ingredient_id in omitted_ids:
        await db.execute(delete(Ingredient).where(Ingredient.id == ingredient_id))


async def get_all_recipes(db: AsyncSession) -> list[dict[str, Any]]:
    async with _store_errors(db):
        result = await db.execute(select(Recipe.__table__).order_by(Recipe.id))
        rows = result.mappings().all()

    return [to_camel_case(row) for row in rows]


async def create_recipe(db: AsyncSession, *, recipe_in: RecipeCreate) -> int:
    recipe_data = recipe_in.model_dump(exclude={"ingredients"})

    db_recipe = Recipe(
        **recipe_data,
        ingredients=[
            Ingredient(name=i.name, quantity=i.quantity, unit=i.unit)
            for i in recipe_in.ingredients
        ],
    )

    async with _store_errors(db, title=recipe_in.title):
        db.add(db_recipe)
        await db.commit()

    logger.info(f"Created recipe {db_recipe.id} with {len(recipe_in.ingredients)} ingredients")
    return db_recipe.id


async def get_recipe_by_id(db: AsyncSession, *, recipe_id: int) -> dict[str, Any]:
    async with _store_errors(db):
        recipe_row, ingredient_rows = await _fetch_recipe(db, recipe_id)

    recipe = to_camel_case(recipe_row)
    recipe["ingredients"] = [to_camel_case(row) for row in ingredient_rows]
    return recipe


async def update_recipe(
    db: AsyncSession, *, recipe_id: int, update_data: Mapping[str, Any]
) -> int:
    async with _store_errors(db):
        recipe_row, ingredient_rows = await _fetch_recipe(db, recipe_id)
        recipe_in = _parse_update(update_data)
        merged = _merge_recipe(recipe_row, recipe_in)

    # scalar fields first, then ingredient inserts/updates, then deletes; one commit for all
    async with _store_errors(db, title=merged.title):
        await db.execute(
            update(Recipe)
            .where(Recipe.id == recipe_id)
            .values(**merged.model_dump(exclude={"ingredients"}))
        )

        if recipe_in.ingredients is not None:
            await _reconcile_ingredients(
                db,
                recipe_id=recipe_id,
                current=ingredient_rows,
                ingredients_in=recipe_in.ingredients,
            )

        await db.commit()

    logger.info(f"Updated recipe {recipe_id}")
    return recipe_id


async def delete_recipe(db: AsyncSession, *, recipe_id: int) -> None:
    if not _is_storable_id(recipe_id):
        return

    async with _store_errors(db):
        await db.execute(delete(Recipe).where(Recipe.id == recipe_id))
        await db.commit()

    logger.info(f"Deleted recipe {recipe_id}")
