from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from collections.abc import Generator, Iterator
from app.core.config import settings
from app.core.errors import DuplicateBookError, StoreError
from app.core.logging import get_logger

logger = get_logger(__name__)


def build_engine(url: str) -> Engine:
    connect_args: dict[str, object] = {}
    if url.startswith("sqlite"):
        # sessions are used from the request threadpool
        connect_args["check_same_thread"] = False
    return create_engine(url, pool_pre_ping=True, future=True, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


def get_db() -> Generator[Session, None, None]:
    """
    One session per request, closed afterwards.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_errors(db: Session) -> Iterator[None]:
    """
    Roll back and translate store failures.
    A violation of the (title, authors) unique constraint becomes
    DuplicateBookError, anything else StoreError.
    """
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        if "uq_books_title_authors" in str(exc.orig) or "unique" in str(exc.orig).lower():
            raise DuplicateBookError() from exc
        logger.error("Store integrity error: %s", exc.orig)
        raise StoreError() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Store error: %s", exc)
        raise StoreError() from exc
