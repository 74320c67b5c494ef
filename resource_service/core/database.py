# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""SQLAlchemy engine factory and schema bootstrap."""
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from resource_service.core.config import settings
from resource_service.core.logging import get_logger

logger = get_logger(__name__)

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id              VARCHAR(36) PRIMARY KEY,
        name            TEXT NOT NULL,
        email           VARCHAR(320) NOT NULL UNIQUE,
        password_hash   TEXT NOT NULL,
        role            VARCHAR(16) NOT NULL,
        skills          TEXT NOT NULL DEFAULT '[]',
        seniority       VARCHAR(16),
        max_capacity    DOUBLE PRECISION,
        department      TEXT,
        created_at      VARCHAR(40) NOT NULL,
        updated_at      VARCHAR(40) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS projects (
        id              VARCHAR(36) PRIMARY KEY,
        name            TEXT NOT NULL,
        description     TEXT,
        start_date      VARCHAR(40) NOT NULL,
        end_date        VARCHAR(40) NOT NULL,
        required_skills TEXT NOT NULL DEFAULT '[]',
        team_size       INTEGER,
        status          VARCHAR(16) NOT NULL DEFAULT 'Planning',
        manager_id      VARCHAR(36) NOT NULL,
        created_at      VARCHAR(40) NOT NULL,
        updated_at      VARCHAR(40) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS project_engineers (
        project_id      VARCHAR(36) NOT NULL,
        engineer_id     VARCHAR(36) NOT NULL,
        position        INTEGER NOT NULL,
        PRIMARY KEY (project_id, engineer_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id                      VARCHAR(36) PRIMARY KEY,
        engineer_id             VARCHAR(36) NOT NULL,
        project_id              VARCHAR(36) NOT NULL,
        allocation_percentage   DOUBLE PRECISION,
        start_date              VARCHAR(40),
        end_date                VARCHAR(40),
        created_at              VARCHAR(40) NOT NULL,
        updated_at              VARCHAR(40) NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_projects_manager ON projects (manager_id)",
    "CREATE INDEX IF NOT EXISTS ix_project_engineers_engineer ON project_engineers (engineer_id)",
    "CREATE INDEX IF NOT EXISTS ix_tasks_engineer ON tasks (engineer_id)",
    "CREATE INDEX IF NOT EXISTS ix_tasks_project ON tasks (project_id)",
)


def create_db_engine(url: str | None = None) -> Engine:
    url = url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        # one shared connection so in-memory databases survive across checkouts
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.POOL_SIZE,
        max_overflow=settings.MAX_OVERFLOW,
        pool_recycle=settings.POOL_RECYCLE,
    )


def init_schema(engine: Engine) -> None:
    with engine.begin() as conn:
        for statement in SCHEMA_STATEMENTS:
            conn.execute(text(statement))
    logger.info("Database schema ready")
