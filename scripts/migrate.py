import sys
import os
from pathlib import Path

from alembic import command
from alembic.config import Config

sys.path.append(os.getcwd())

BASE_DIR = Path(__file__).parents[1]
ALEMBIC_INI_PATH = BASE_DIR / "alembic.ini"


def migrate(revision: str = "head") -> None:
    alembic_cfg = Config(str(ALEMBIC_INI_PATH))
    command.upgrade(alembic_cfg, revision)


def main():
    print("Running database migration...")
    try:
        migrate()
    except Exception as ex:
        print(f"Migration failed: {ex}")
        print("Unable to run migration. Are your database credentials in .env correct?")
        sys.exit(1)

    print("Finished running database migration!")


if __name__ == "__main__":
    main()
