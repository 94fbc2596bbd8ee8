"""Card model. Cards carry no scheduling state of their own."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.ids import new_id
from backend.models.base import Base, TimestampMixin


class Card(Base, TimestampMixin):
    """A front/back flashcard belonging to one deck.

    ``id`` is a UUIDv7 string, so ``ORDER BY id`` is creation order.
    """

    __tablename__ = "cards"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    deck_id: Mapped[str] = mapped_column(
        ForeignKey("decks.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=False, index=True
    )
    front_content: Mapped[str] = mapped_column(Text, nullable=False)
    back_content: Mapped[str] = mapped_column(Text, nullable=False)

    deck: Mapped["Deck"] = relationship(back_populates="cards")  # type: ignore[name-defined] # noqa: F821
    learning_states: Mapped[list["LearningState"]] = relationship(  # type: ignore[name-defined] # noqa: F821
        back_populates="card", passive_deletes=True
    )
    review_events: Mapped[list["ReviewEvent"]] = relationship(  # type: ignore[name-defined] # noqa: F821
        back_populates="card", passive_deletes=True
    )
