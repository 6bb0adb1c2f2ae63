from sqlalchemy.orm import Session
from app.models.book import Book
from app.schemas.book import BookCreate, BookUpdate
from app.db.session import store_errors
from sqlalchemy import ColumnElement, func, or_, select
import uuid


def _matches(q: str) -> ColumnElement[bool]:
    # literal, case-insensitive substring on title OR authors
    return or_(
        Book.title.icontains(q, autoescape=True),
        Book.authors.icontains(q, autoescape=True),
    )


class BookRepository:

    @staticmethod
    # List books, one page at a time
    def list(
        db: Session,
        skip: int = 0,
        limit: int = 10,
        q: str | None = None,
    ) -> list[Book]:
        stmt = select(Book)

        if q:
            stmt = stmt.where(_matches(q))

        stmt = stmt.order_by(Book.title.asc(), Book.id.asc()).offset(skip).limit(limit)

        with store_errors(db):
            return list(db.scalars(stmt).all())

    @staticmethod
    # Count books matching the same filter as list()
    def count(db: Session, q: str | None = None) -> int:
        stmt = select(func.count()).select_from(Book)
        if q:
            stmt = stmt.where(_matches(q))

        with store_errors(db):
            return db.scalar(stmt) or 0

    @staticmethod
    # Get a book by ID
    def get(db: Session, book_id: uuid.UUID) -> Book | None:
        with store_errors(db):
            return db.get(Book, book_id)

    @staticmethod
    # Exact (title, authors) match
    def find_by_title_and_authors(db: Session, title: str, authors: str) -> Book | None:
        stmt = select(Book).where(Book.title == title, Book.authors == authors)
        with store_errors(db):
            return db.scalars(stmt).first()

    @staticmethod
    # Create a new book
    def create(db: Session, data: BookCreate) -> Book:
        book = Book(**data.model_dump())
        with store_errors(db):
            db.add(book)
            db.commit()
            db.refresh(book)
        return book

    @staticmethod
    # Replace every mutable field of a book
    def update(db: Session, book: Book, data: BookUpdate) -> Book:
        with store_errors(db):
            for field, value in data.model_dump().items():
                setattr(book, field, value)
            db.commit()
            db.refresh(book)
        return book

    @staticmethod
    # Delete a book
    def delete(db: Session, book: Book) -> None:
        with store_errors(db):
            db.delete(book)
            db.commit()
