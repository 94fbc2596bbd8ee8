from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.config import utcnow
from backend.ids import new_id
from backend.models.base import Base


class ReviewEvent(Base):
    """Append-only record of a single review. Never read by the scheduler."""

    __tablename__ = "study_events"
    __table_args__ = (
        CheckConstraint("grade >= 0 AND grade <= 3", name="ck_grade_range"),
        Index("ix_study_events_studied_by_studied_at", "studied_by", "studied_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    card_id: Mapped[str] = mapped_column(
        ForeignKey("cards.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=False, index=True
    )
    deck_id: Mapped[str] = mapped_column(
        ForeignKey("decks.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=False, index=True
    )
    studied_by: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=False
    )
    grade: Mapped[int] = mapped_column(Integer, nullable=False)  # 0=forgot .. 3=perfect
    studied_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    card: Mapped["Card"] = relationship(back_populates="review_events")  # type: ignore[name-defined] # noqa: F821
