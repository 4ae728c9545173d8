import fcntl
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from alembic.config import Config

from alembic import command
from livebracket.config import config
from livebracket.utils.logging import logger

BACKEND_DIR = Path(__file__).resolve().parents[2]


@contextmanager
def migration_lock(lock_path: Path) -> Iterator[None]:
    """Serialize migrations across worker processes that start at the same time."""
    with lock_path.open("w", encoding="utf-8") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file, fcntl.LOCK_UN)


def get_alembic_config() -> Config:
    alembic_config = Config(str(BACKEND_DIR / "alembic.ini"))
    alembic_config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    alembic_config.set_main_option("sqlalchemy.url", str(config.pg_dsn))
    return alembic_config


def alembic_run_migrations() -> None:
    with migration_lock(Path(config.migration_lock_path)):
        logger.info("Migrating document store to head")
        command.upgrade(get_alembic_config(), "head")
