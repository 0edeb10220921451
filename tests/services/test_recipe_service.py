import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import (
    DuplicateRecipeTitleError,
    InvalidIngredientError,
    InvalidRecipeError,
    RecipeNotFoundError,
)
from app.models import Ingredient, Recipe
from app.schemas import IngredientCreate, RecipeCreate
from app.services import recipe_service


def _recipe_in(title: str = "Pancakes", **kwargs) -> RecipeCreate:
    return RecipeCreate(
        title=title,
        author="Jane Doe",
        description="Whisk and fry.",
        prep_time=5,
        ingredients=[
            IngredientCreate(name="flour", quantity=200, unit="g"),
            IngredientCreate(name="egg", quantity=2, unit="pcs"),
        ],
        **kwargs,
    )


async def _ingredients(session_factory, recipe_id: int) -> dict[str, Ingredient]:
    async with session_factory() as session:
        result = await session.execute(
            select(Ingredient).where(Ingredient.recipe_id == recipe_id)
        )
        return {i.name: i for i in result.scalars().all()}


class _FakeOrig(Exception):
    def __init__(self, message: str, sqlstate: str | None = None):
        super().__init__(message)
        self.sqlstate = sqlstate


@pytest.mark.parametrize(
    "orig, expected",
    [
        (_FakeOrig("boom", sqlstate="23505"), True),
        (_FakeOrig('duplicate key value violates unique constraint "uq_recipes_title"'), True),
        (_FakeOrig("UNIQUE constraint failed: recipes.title"), True),
        (_FakeOrig("NOT NULL constraint failed: recipes.author", sqlstate="23502"), False),
    ],
)
def test_is_duplicate_entry(orig, expected):
    ex = IntegrityError("INSERT INTO recipes ...", {}, orig)
    assert recipe_service._is_duplicate_entry(ex) is expected


@pytest.mark.asyncio
class TestRecipeService:
    async def test_create_and_get(self, db_session):
        recipe_id = await recipe_service.create_recipe(db_session, recipe_in=_recipe_in())

        recipe = await recipe_service.get_recipe_by_id(db_session, recipe_id=recipe_id)
        assert recipe["title"] == "Pancakes"
        assert recipe["prepTime"] == 5
        assert recipe["cookingTime"] is None
        assert {i["name"] for i in recipe["ingredients"]} == {"flour", "egg"}

    async def test_create_duplicate_title(self, db_session):
        await recipe_service.create_recipe(db_session, recipe_in=_recipe_in())

        with pytest.raises(DuplicateRecipeTitleError) as exc_info:
            await recipe_service.create_recipe(db_session, recipe_in=_recipe_in())
        assert exc_info.value.status_code == 409

        recipes = await recipe_service.get_all_recipes(db_session)
        assert len(recipes) == 1

    async def test_get_missing_recipe(self, db_session):
        with pytest.raises(RecipeNotFoundError) as exc_info:
            await recipe_service.get_recipe_by_id(db_session, recipe_id=123)
        assert exc_info.value.detail == "Recipe with ID 123 not found."

    async def test_update_fills_omitted_fields_from_stored_ingredient(self, db_session, session_factory):
        recipe_id = await recipe_service.create_recipe(db_session, recipe_in=_recipe_in())
        stored = await _ingredients(session_factory, recipe_id)

        update_data = {"ingredients": [{"id": stored["flour"].id, "name": "", "unit": "kg"}]}
        await recipe_service.update_recipe(db_session, recipe_id=recipe_id, update_data=update_data)

        after = await _ingredients(session_factory, recipe_id)
        assert set(after) == {"flour"}
        assert after["flour"].id == stored["flour"].id
        assert after["flour"].quantity == 200
        assert after["flour"].unit == "kg"

    async def test_update_rolls_back_on_invalid_new_ingredient(self, db_session, session_factory):
        recipe_id = await recipe_service.create_recipe(db_session, recipe_in=_recipe_in())
        stored = await _ingredients(session_factory, recipe_id)

        update_data = {
            "servings": 8,
            "ingredients": [
                {"id": stored["egg"].id, "quantity": 3},
                {"name": "sugar", "quantity": 1},
            ],
        }
        with pytest.raises(InvalidIngredientError) as exc_info:
            await recipe_service.update_recipe(db_session, recipe_id=recipe_id, update_data=update_data)
        assert exc_info.value.missing_fields == ["unit"]

        after = await _ingredients(session_factory, recipe_id)
        assert set(after) == {"flour", "egg"}
        assert after["egg"].quantity == 2

        async with session_factory() as session:
            recipe = await session.get(Recipe, recipe_id)
            assert recipe.servings is None

    async def test_update_validates_merged_payload(self, db_session):
        recipe_id = await recipe_service.create_recipe(db_session, recipe_in=_recipe_in())

        with pytest.raises(InvalidRecipeError):
            await recipe_service.update_recipe(
                db_session, recipe_id=recipe_id, update_data={"author": None}
            )

    async def test_update_rejects_non_numeric_quantity(self, db_session, session_factory):
        recipe_id = await recipe_service.create_recipe(db_session, recipe_in=_recipe_in())

        update_data = {"ingredients": [{"name": "sugar", "quantity": "3", "unit": "g"}]}
        with pytest.raises(InvalidRecipeError):
            await recipe_service.update_recipe(db_session, recipe_id=recipe_id, update_data=update_data)

        assert set(await _ingredients(session_factory, recipe_id)) == {"flour", "egg"}

    async def test_update_missing_recipe(self, db_session):
        with pytest.raises(RecipeNotFoundError):
            await recipe_service.update_recipe(
                db_session, recipe_id=5, update_data={"title": "Nothing"}
            )

    async def test_update_missing_recipe_checked_before_payload(self, db_session):
        with pytest.raises(RecipeNotFoundError):
            await recipe_service.update_recipe(db_session, recipe_id=5, update_data={"title": ""})

    @pytest.mark.parametrize("recipe_id", [2**31, -(2**31) - 1, 10**20])
    async def test_out_of_range_id_is_not_found(self, db_session, recipe_id):
        with pytest.raises(RecipeNotFoundError):
            await recipe_service.get_recipe_by_id(db_session, recipe_id=recipe_id)
        with pytest.raises(RecipeNotFoundError):
            await recipe_service.update_recipe(
                db_session, recipe_id=recipe_id, update_data={"title": "Nothing"}
            )

        await recipe_service.delete_recipe(db_session, recipe_id=recipe_id)

    async def test_delete_cascades_to_ingredients(self, db_session, session_factory):
        recipe_id = await recipe_service.create_recipe(db_session, recipe_in=_recipe_in())

        await recipe_service.delete_recipe(db_session, recipe_id=recipe_id)

        assert await _ingredients(session_factory, recipe_id) == {}
        with pytest.raises(RecipeNotFoundError):
            await recipe_service.get_recipe_by_id(db_session, recipe_id=recipe_id)
