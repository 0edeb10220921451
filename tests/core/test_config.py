import pytest
from pydantic import ValidationError

from app.core.config import Settings


def test_missing_database_settings_are_reported():
    with pytest.raises(ValidationError) as exc_info:
        Settings(_env_file=None, DATABASE_URL="", DB_NAME="", DB_USER="", DB_PASSWORD="")

    assert "DB_NAME,DB_USER,DB_PASSWORD" in str(exc_info.value)


def test_async_database_url_from_parts():
    settings = Settings(
        _env_file=None,
        DATABASE_URL="",
        DB_NAME="recipes",
        DB_USER="cook",
        DB_PASSWORD="secret",
        DB_HOST="db",
        DB_INTERNAL_PORT=5433,
    )

    assert settings.ASYNC_DATABASE_URL == "postgresql+asyncpg://cook:secret@db:5433/recipes"


def test_database_url_overrides_parts():
    settings = Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///recipes.db")

    assert settings.ASYNC_DATABASE_URL == "sqlite+aiosqlite:///recipes.db"
