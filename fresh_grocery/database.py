"""Database connection and migration management."""

import logging
import re
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from flask import current_app
from sqlalchemy import MetaData, text

from fresh_grocery.extensions import db

logger = logging.getLogger(__name__)


def init_db() -> None:
    import fresh_grocery.models  # noqa: F401
    db.create_all()


def check_db_connection() -> bool:
    try:
        with db.engine.connect() as conn:
            result = conn.execute(text("SELECT 1"))
            return result.scalar() == 1
    except Exception as e:
        logger.warning(f"Checking database connection failed: {e}")
        return False


def _get_alembic_config() -> Config:
    """Alembic configuration pointed at the current Flask app's database."""
    alembic_cfg_path = Path(__file__).resolve().parent.parent / "alembic.ini"
    config = Config(str(alembic_cfg_path))
    config.set_main_option("script_location", str(alembic_cfg_path.parent / "alembic"))
    db_url = current_app.config.get("SQLALCHEMY_DATABASE_URI", "")
    config.set_main_option("sqlalchemy.url", db_url.replace("+psycopg", ""))
    return config


def get_current_revision() -> str | None:
    try:
        with db.engine.connect() as conn:
            result = conn.execute(text("SELECT version_num FROM alembic_version LIMIT 1"))
            row = result.fetchone()
            return row[0] if row else None
    except Exception:
        # No alembic_version table yet
        return None


def get_pending_migrations() -> list[str]:
    try:
        config = _get_alembic_config()
        script = ScriptDirectory.from_config(config)
        current_rev = get_current_revision()
        head_rev = script.get_current_head()

        if not head_rev or current_rev == head_rev:
            return []

        base = current_rev or "base"
        revisions = [
            rev.revision
            for rev in script.walk_revisions(base=base, head=head_rev)
            if rev.revision != current_rev
        ]
        revisions.reverse()
        return revisions
    except Exception as e:
        logger.warning(f"Failed to check pending migrations: {e}")
        return []


def drop_all_tables() -> None:
    metadata = MetaData()
    metadata.reflect(bind=db.engine)
    metadata.drop_all(bind=db.engine)


def _get_migration_info(script_dir: ScriptDirectory, revision: str) -> tuple[str, str]:
    rev_obj = script_dir.get_revision(revision)
    if not rev_obj or not rev_obj.path:
        return revision[:7], "Unknown migration"
    migration_file = Path(rev_obj.path)
    if not migration_file.exists():
        return revision[:7], "Migration file not found"
    docstring_match = re.search(r'"""([^"]+)"""', migration_file.read_text())
    if docstring_match:
        return revision[:7], docstring_match.group(1).strip().splitlines()[0]
    return revision[:7], "Migration"


def upgrade_database(recreate: bool = False) -> list[tuple[str, str]]:
    """Apply pending migrations, optionally dropping everything first.

    SQLite (used by the test suite) is rebuilt from model metadata and
    stamped at head instead of replaying migrations.
    """
    engine = db.engine
    config = _get_alembic_config()

    if recreate and engine.dialect.name == "sqlite":
        logger.info("SQLite detected - rebuilding schema using SQLAlchemy metadata")
        drop_all_tables()
        init_db()
        with engine.begin() as connection:
            config.attributes["connection"] = connection
            command.stamp(config, "head")
        return []

    if recreate:
        drop_all_tables()

    pending = get_pending_migrations()
    if not pending:
        return []

    script = ScriptDirectory.from_config(config)
    applied_migrations: list[tuple[str, str]] = []

    with engine.begin() as connection:
        config.attributes["connection"] = connection
        for revision in pending:
            rev_short, description = _get_migration_info(script, revision)
            logger.info("Applying migration %s: %s", rev_short, description)
            command.upgrade(config, revision)
            applied_migrations.append((rev_short, description))

    return applied_migrations
