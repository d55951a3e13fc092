import re
from typing import Any, Dict, List, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from jobly.core.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=10,  # Connection pool size
    max_overflow=20  # Allow up to 20 connections beyond pool_size
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

_POSITIONAL = re.compile(r"\$(\d+)")


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def execute(db: Session, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """
    Run a statement written with ``$1``-style placeholders.

    ``values[n - 1]`` is bound to ``$n``. Rows come back as plain dicts keyed
    by column label; statements without a result set return ``[]``.
    Database errors propagate unchanged.

    Args:
        db: Database session
        sql: Statement text, possibly with fragments from jobly.core.sql
        values: Parameter values in placeholder order

    Returns:
        List of row dicts
    """
    statement = _POSITIONAL.sub(lambda m: f":p{m.group(1)}", sql)
    params = {f"p{i}": value for i, value in enumerate(values, start=1)}

    if db.get_bind().dialect.name == "sqlite":
        # SQLite has no ILIKE; its LIKE is already case-insensitive for ASCII
        statement = statement.replace(" ILIKE ", " LIKE ")

    result = db.execute(text(statement), params)
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings().all()]


def init_db():
    """
    Initialize database.

    Alembic owns table creation ("alembic upgrade head"); this only makes
    sure every model is imported and registered on Base.metadata.
    """
    from jobly.models import company, job, user, application  # noqa: F401
