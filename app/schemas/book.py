from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)
from typing import ClassVar, cast
import uuid

from app.core.errors import BookValidationError

REQUIRED_FIELDS: tuple[str, ...] = (
    "title",
    "authors",
    "publication_date",
    "publisher",
    "price",
)


def check_price(price: str) -> None:
    try:
        value = Decimal(price.strip())
    except InvalidOperation:
        raise BookValidationError("price", "must be a decimal number") from None
    if not value.is_finite() or value < 0:
        raise BookValidationError("price", "must be a non-negative decimal number")


def validate_book(candidate: Mapping[str, object]) -> None:
    """
    Check a candidate record before it is written.

    Raises BookValidationError for the first required field that is missing,
    not text, or blank, and for a price that is not a non-negative decimal.
    Pure: no I/O, the candidate is not modified.
    """
    for field in REQUIRED_FIELDS:
        value = candidate.get(field)
        if value is None:
            raise BookValidationError(field, "is required")
        if not isinstance(value, str):
            raise BookValidationError(field, "must be text")
        if not value.strip():
            raise BookValidationError(field, "cannot be empty")

    check_price(cast(str, candidate["price"]))

    description = candidate.get("description", "")
    if description is not None and not isinstance(description, str):
        raise BookValidationError("description", "must be text")


# Book base schema
class BookBase(BaseModel):
    title: str
    authors: str = Field(validation_alias=AliasChoices("authors", "author"))
    publication_date: str = Field(
        validation_alias=AliasChoices("publication_date", "year")
    )
    publisher: str
    price: str
    description: str = ""

    model_config: ClassVar[ConfigDict] = ConfigDict(populate_by_name=True)

    @field_validator("price", "publication_date", mode="before")
    @classmethod
    def number_to_text(cls, v: object) -> object:
        # clients send `price: 12.99` or `year: 1965` as JSON numbers
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("title", "authors", "publication_date", "publisher", "price", mode="after")
    @classmethod
    def trim_and_check(cls, v: str, info: ValidationInfo) -> str:
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name} cannot be empty")
        return v

    @field_validator("price", mode="after")
    @classmethod
    def decimal_price(cls, v: str) -> str:
        check_price(v)
        return v

    @field_validator("description", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        return "" if v is None else v


# Book create schema
class BookCreate(BookBase):
    pass


# Full-record replacement; omitted description is reset to ""
class BookUpdate(BookBase):
    pass


# Book read schema
class BookRead(BaseModel):
    id: uuid.UUID
    title: str
    authors: str
    publication_date: str
    publisher: str
    price: str
    description: str

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)


class BookPage(BaseModel):
    books: list[BookRead]
    total_pages: int = Field(serialization_alias="totalPages")
    current_page: int = Field(serialization_alias="currentPage")


class BookSearchPage(BookPage):
    total_books: int = Field(serialization_alias="totalBooks")


class DescriptionRequest(BaseModel):
    input: str

    @field_validator("input")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("input cannot be empty")
        return v


class DescriptionResponse(BaseModel):
    description: str


class MessageResponse(BaseModel):
    message: str
