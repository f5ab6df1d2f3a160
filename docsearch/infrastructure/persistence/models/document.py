"""Document ORM model. Table: documents."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from docsearch.infrastructure.persistence.database import Base
from docsearch.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin

TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 5000
AUTHOR_MAX_LENGTH = 255


class Document(CuidMixin, TimestampMixin, Base):
    """Searchable document. Indexed on every filterable/sortable column."""

    __tablename__ = "documents"

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[str | None] = mapped_column(String(CONTENT_MAX_LENGTH), nullable=True)
    author: Mapped[str | None] = mapped_column(
        String(AUTHOR_MAX_LENGTH), nullable=True, index=True
    )
    category: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    status: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
