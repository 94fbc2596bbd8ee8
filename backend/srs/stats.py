"""Learner statistics computed from learning states and review events."""

from dataclasses import dataclass
from datetime import datetime, time, timedelta

from sqlalchemy import and_, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import utcnow
from backend.models.card import Card
from backend.models.deck import Deck
from backend.models.learning_state import LearningState
from backend.models.review_event import ReviewEvent
from backend.srs.due import count_due
from backend.srs.sm2 import PASSING_GRADE

MATURE_INTERVAL_DAYS = 21
RETENTION_WINDOW_DAYS = 30


@dataclass
class LearnerStats:
    total_decks: int
    total_cards: int
    cards_due: int
    cards_new: int  # Never studied by the learner
    cards_mature: int  # interval >= 21 days
    total_reviews: int
    average_retention: float | None  # Share of passing grades over the last 30 days
    streak_days: int


async def learner_stats(
    session: AsyncSession,
    user_id: str,
    now: datetime | None = None,
) -> LearnerStats:
    """Summarize a learner's decks and study activity."""
    now = now or utcnow()
    owned_decks = select(Deck.id).where(Deck.user_id == user_id)

    total_decks = (
        await session.execute(select(func.count(Deck.id)).where(Deck.user_id == user_id))
    ).scalar() or 0

    total_cards = (
        await session.execute(select(func.count(Card.id)).where(Card.deck_id.in_(owned_decks)))
    ).scalar() or 0

    studied_cards_stmt = (
        select(func.count(LearningState.card_id))
        .join(Card, Card.id == LearningState.card_id)
        .where(LearningState.user_id == user_id, Card.deck_id.in_(owned_decks))
    )
    studied_cards = (await session.execute(studied_cards_stmt)).scalar() or 0

    mature_stmt = studied_cards_stmt.where(LearningState.interval >= MATURE_INTERVAL_DAYS)
    cards_mature = (await session.execute(mature_stmt)).scalar() or 0

    cards_due = await count_due(session, user_id, owner_id=user_id, now=now)

    total_reviews = (
        await session.execute(
            select(func.count(ReviewEvent.id)).where(ReviewEvent.studied_by == user_id)
        )
    ).scalar() or 0

    recent_cutoff = now - timedelta(days=RETENTION_WINDOW_DAYS)
    recent = and_(ReviewEvent.studied_by == user_id, ReviewEvent.studied_at >= recent_cutoff)
    retention_total = (
        await session.execute(select(func.count(ReviewEvent.id)).where(recent))
    ).scalar() or 0
    retention_pass = (
        await session.execute(
            select(func.count(ReviewEvent.id)).where(recent, ReviewEvent.grade >= PASSING_GRADE)
        )
    ).scalar() or 0
    average_retention = retention_pass / retention_total if retention_total > 0 else None

    return LearnerStats(
        total_decks=total_decks,
        total_cards=total_cards,
        cards_due=cards_due,
        cards_new=total_cards - studied_cards,
        cards_mature=cards_mature,
        total_reviews=total_reviews,
        average_retention=round(average_retention, 3) if average_retention is not None else None,
        streak_days=await _calculate_streak(session, user_id, now),
    )


async def _calculate_streak(
    session: AsyncSession,
    user_id: str,
    now: datetime,
) -> int:
    """Count consecutive UTC days with at least one review, ending today."""
    today = now.date()
    tomorrow = datetime.combine(today + timedelta(days=1), time.min)
    result = await session.execute(
        select(distinct(func.date(ReviewEvent.studied_at))).where(
            ReviewEvent.studied_by == user_id,
            ReviewEvent.studied_at < tomorrow,
        )
    )
    reviewed_days = {str(day) for day in result.scalars()}

    streak = 0
    while (today - timedelta(days=streak)).isoformat() in reviewed_days:
        streak += 1
    return streak
