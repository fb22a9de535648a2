"""FastAPI dependencies for dependency injection."""

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from payroll_deductions.database import init_db


def get_db_session() -> Generator[Session, None, None]:
    """Get database session dependency; commits when the request succeeds."""
    _, factory = init_db()
    with factory() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


# Type aliases for cleaner dependency injection
DbSession = Annotated[Session, Depends(get_db_session)]
