from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.ids import new_id
from backend.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """A learner. Owns decks and has one learning state per studied card."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    decks: Mapped[list["Deck"]] = relationship(  # type: ignore[name-defined] # noqa: F821
        back_populates="owner", passive_deletes=True
    )
