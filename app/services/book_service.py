from __future__ import annotations
from sqlalchemy.orm import Session
import uuid
from app.core.errors import BookNotFoundError, DuplicateBookError, InvalidQueryError
from app.core.logging import get_logger
from app.schemas.book import (
    BookCreate,
    BookPage,
    BookRead,
    BookSearchPage,
    BookUpdate,
    validate_book,
)
from app.repos.book_repo import BookRepository
from app.models.book import Book
from app.utils.pagination import page_window, total_pages

logger = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


class BookService:
    @staticmethod
    # List books
    def list_books(
        db: Session,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> BookPage:
        skip, limit = page_window(page, limit)
        books = BookRepository.list(db, skip=skip, limit=limit)
        count = BookRepository.count(db)
        return BookPage(
            books=[BookRead.model_validate(b) for b in books],
            total_pages=total_pages(count, limit),
            current_page=page,
        )

    @staticmethod
    # Search books by title or authors
    def search_books(
        db: Session,
        term: str | None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> BookSearchPage:
        term = (term or "").strip()
        if not term:
            raise InvalidQueryError("Please provide a search query")

        skip, limit = page_window(page, limit)
        books = BookRepository.list(db, skip=skip, limit=limit, q=term)
        count = BookRepository.count(db, q=term)
        return BookSearchPage(
            books=[BookRead.model_validate(b) for b in books],
            total_pages=total_pages(count, limit),
            current_page=page,
            total_books=count,
        )

    @staticmethod
    def get_book(db: Session, book_id: uuid.UUID) -> Book:
        book = BookRepository.get(db, book_id)
        if book is None:
            raise BookNotFoundError()
        return book

    @staticmethod
    # Create book
    def create_book(db: Session, data: BookCreate) -> Book:
        validate_book(data.model_dump())

        # The unique constraint on (title, authors) still catches a
        # concurrent insert that slips past this check.
        if BookRepository.find_by_title_and_authors(db, data.title, data.authors):
            raise DuplicateBookError()

        book = BookRepository.create(db, data)
        logger.info("Created book %s", book.id)
        return book

    @staticmethod
    # Replace a book wholesale
    def update_book(db: Session, book_id: uuid.UUID, data: BookUpdate) -> Book:
        book = BookService.get_book(db, book_id)
        validate_book(data.model_dump())
        book = BookRepository.update(db, book, data)
        logger.info("Updated book %s", book.id)
        return book

    @staticmethod
    # Delete book
    def delete_book(db: Session, book_id: uuid.UUID) -> None:
        book = BookService.get_book(db, book_id)
        BookRepository.delete(db, book)
        logger.info("Deleted book %s", book_id)
