"""Per-(card, learner) SM-2 scheduling state."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.models.base import Base, TimestampMixin


class LearningState(Base, TimestampMixin):
    """One learner's progress on one card.

    Created on the learner's first review of the card and updated in place on
    every later review. Removed by cascade when the card or learner goes away.
    """

    __tablename__ = "card_learning_states"
    __table_args__ = (
        CheckConstraint("ease_factor >= 1.3 AND ease_factor <= 2.5", name="ck_ease_factor_range"),
        CheckConstraint('"interval" >= 0', name="ck_interval_non_negative"),
        Index("ix_card_learning_states_user_id", "user_id"),
        Index("ix_card_learning_states_next_study_date", "next_study_date"),
    )

    card_id: Mapped[str] = mapped_column(
        ForeignKey("cards.id", ondelete="CASCADE", onupdate="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"), primary_key=True
    )
    ease_factor: Mapped[float] = mapped_column(Float, nullable=False)
    interval: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    next_study_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    card: Mapped["Card"] = relationship(back_populates="learning_states")  # type: ignore[name-defined] # noqa: F821
