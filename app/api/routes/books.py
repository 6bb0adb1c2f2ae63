from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.book import Book
from app.services.book_service import BookService, DEFAULT_LIMIT, DEFAULT_PAGE
from app.services.description_service import DescriptionGenerator, get_description_generator
from app.schemas.book import (
    BookCreate,
    BookPage,
    BookRead,
    BookSearchPage,
    BookUpdate,
    DescriptionRequest,
    DescriptionResponse,
    MessageResponse,
)
from typing import Annotated
import uuid
from starlette.status import HTTP_201_CREATED

router = APIRouter(prefix="/books", tags=["books"])


# Resolved before the request body is validated, so an absent id is a 404
# whatever the payload looks like.
def get_book_or_404(
    book_id: uuid.UUID,
    db: Annotated[Session, Depends(get_db)],
) -> Book:
    return BookService.get_book(db, book_id)


@router.get("", response_model=BookPage)
@router.get("/", response_model=BookPage, include_in_schema=False)
def list_books(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query()] = DEFAULT_PAGE,
    limit: Annotated[int, Query()] = DEFAULT_LIMIT,
):
    return BookService.list_books(db, page=page, limit=limit)


@router.get("/search", response_model=BookSearchPage)
def search_books(
    db: Annotated[Session, Depends(get_db)],
    search: Annotated[str, Query()] = "",
    page: Annotated[int, Query()] = DEFAULT_PAGE,
    limit: Annotated[int, Query()] = DEFAULT_LIMIT,
):
    return BookService.search_books(db, search, page=page, limit=limit)


@router.post("/chat-ai", response_model=DescriptionResponse)
def generate_description(
    data: DescriptionRequest,
    generator: Annotated[DescriptionGenerator, Depends(get_description_generator)],
):
    return DescriptionResponse(description=generator.generate_description(data.input))


@router.get("/{book_id}", response_model=BookRead)
def get_book(
    book: Annotated[Book, Depends(get_book_or_404)],
):
    return book


@router.post("", response_model=BookRead, status_code=HTTP_201_CREATED)
@router.post("/", response_model=BookRead, status_code=HTTP_201_CREATED, include_in_schema=False)
def create_book(
    data: BookCreate,
    db: Annotated[Session, Depends(get_db)],
):
    return BookService.create_book(db, data)


@router.put("/{book_id}", response_model=BookRead)
def update_book(
    book: Annotated[Book, Depends(get_book_or_404)],
    data: BookUpdate,
    db: Annotated[Session, Depends(get_db)],
):
    return BookService.update_book(db, book.id, data)


@router.delete("/{book_id}", response_model=MessageResponse)
def delete_book(
    book_id: uuid.UUID,
    db: Annotated[Session, Depends(get_db)],
):
    BookService.delete_book(db, book_id)
    return MessageResponse(message="Book deleted")
