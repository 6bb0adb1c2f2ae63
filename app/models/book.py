from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Text, Uuid, UniqueConstraint, Constraint
import uuid
from app.models.base import Base

#Book
class Book(Base):
    __tablename__: str = "books"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    authors: Mapped[str] = mapped_column(Text, nullable=False)
    publication_date: Mapped[str] = mapped_column(Text, nullable=False)
    publisher: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=""
    )

    __table_args__: tuple[Constraint, ...] = (
        UniqueConstraint("title", "authors", name="uq_books_title_authors"),
    )
