"""Review recording.

Reads a learner's current state for a card, runs the SM-2 scheduler and
writes the new state plus an immutable review event in one transaction.

Two submissions for the same (card, learner) must not interleave their
read and write, or the later write would be computed from a stale state.
Submissions are serialized per key with an ``asyncio.Lock`` inside the
process, and the state row is read ``FOR UPDATE`` so backends with row
locks also serialize across processes.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import to_naive_utc, utcnow
from backend.errors import NotFoundCardError, NotFoundDeckError, NotFoundUserError
from backend.ids import new_id
from backend.models.card import Card
from backend.models.review_event import ReviewEvent
from backend.models.user import User
from backend.srs.sm2 import LearningProgress, compute_next_state
from backend.store.learning_states import get_learning_state, to_progress, upsert_learning_state

logger = logging.getLogger(__name__)

_review_locks: weakref.WeakValueDictionary[tuple[str, str], asyncio.Lock] = weakref.WeakValueDictionary()


def _lock_for(card_id: str, user_id: str) -> asyncio.Lock:
    key = (card_id, user_id)
    lock = _review_locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _review_locks[key] = lock
    return lock


@dataclass(frozen=True)
class ReviewOutcome:
    """What a recorded review produced."""

    event_id: str
    card_id: str
    deck_id: str
    user_id: str
    grade: int
    studied_at: datetime
    progress: LearningProgress


async def record_review(
    session: AsyncSession,
    card_id: str,
    user_id: str,
    grade: int,
    studied_at: datetime | None = None,
    deck_id: str | None = None,
) -> ReviewOutcome:
    """Record one review and reschedule the card for the learner.

    Args:
        session: Database session. Committed on success, rolled back on error.
        card_id: The reviewed card.
        user_id: The learner.
        grade: Review grade (0-3), validated by the caller.
        studied_at: When the review happened (defaults to utcnow). Aware
            datetimes keep their timezone for the day arithmetic.
        deck_id: If given, the card must belong to this deck.

    Returns:
        The ReviewOutcome, including the newly computed LearningProgress.

    Raises:
        NotFoundCardError: The card does not exist.
        NotFoundDeckError: The card is not in ``deck_id``.
        NotFoundUserError: The learner does not exist.
    """
    studied_at = studied_at or utcnow()

    async with _lock_for(card_id, user_id):
        try:
            card = await session.get(Card, card_id)
            if card is None:
                raise NotFoundCardError(card_id)
            if deck_id is not None and card.deck_id != deck_id:
                raise NotFoundDeckError(deck_id)
            if await session.get(User, user_id) is None:
                raise NotFoundUserError(user_id)

            card_deck_id = card.deck_id
            state = await get_learning_state(session, card_id, user_id, for_update=True)
            prior = to_progress(state) if state is not None else None
            progress = compute_next_state(prior, grade, studied_at)

            await upsert_learning_state(session, card_id, user_id, progress, existing=state)
            event_id = new_id()
            event = ReviewEvent(
                id=event_id,
                card_id=card_id,
                deck_id=card_deck_id,
                studied_by=user_id,
                grade=int(grade),
                studied_at=to_naive_utc(studied_at),
            )
            session.add(event)
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    logger.info(
        "Recorded review of card %s by %s: grade=%d interval=%d ef=%.2f next=%s",
        card_id,
        user_id,
        grade,
        progress.interval,
        progress.ease_factor,
        progress.next_study_date.isoformat(),
    )
    return ReviewOutcome(
        event_id=event_id,
        card_id=card_id,
        deck_id=card_deck_id,
        user_id=user_id,
        grade=int(grade),
        studied_at=studied_at,
        progress=progress,
    )
