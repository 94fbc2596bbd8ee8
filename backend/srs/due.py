"""Due-card selection.

A card is due for a learner when the learner has never studied it (no
learning state row) or when its ``next_study_date`` has arrived. Cards are
returned in creation order, i.e. ascending UUIDv7 id.
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, Select, and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import utcnow
from backend.models.card import Card
from backend.models.deck import Deck
from backend.models.learning_state import LearningState
from backend.pagination import Page, paginate

logger = logging.getLogger(__name__)


def learning_state_join(user_id: str) -> ColumnElement[bool]:
    """ON clause pairing each card with this learner's state, if any."""
    return and_(LearningState.card_id == Card.id, LearningState.user_id == user_id)


def due_predicate(now: datetime) -> ColumnElement[bool]:
    """Never studied, or scheduled at or before ``now``."""
    return or_(LearningState.card_id.is_(None), LearningState.next_study_date <= now)


def due_cards_query(
    user_id: str,
    deck_id: str | None = None,
    owner_id: str | None = None,
    now: datetime | None = None,
) -> Select[Any]:
    """Build the unordered due-card select for a learner.

    Args:
        user_id: The learner whose schedule is consulted.
        deck_id: Restrict to one deck's cards.
        owner_id: Restrict to cards in decks owned by this user.
        now: Reference time (defaults to utcnow).
    """
    now = now or utcnow()
    query = (
        select(Card)
        .outerjoin(LearningState, learning_state_join(user_id))
        .where(due_predicate(now))
    )
    if deck_id is not None:
        query = query.where(Card.deck_id == deck_id)
    if owner_id is not None:
        query = query.where(Card.deck_id.in_(select(Deck.id).where(Deck.user_id == owner_id)))
    return query


async def select_due(
    session: AsyncSession,
    user_id: str,
    deck_id: str | None = None,
    limit: int | None = None,
    now: datetime | None = None,
    owner_id: str | None = None,
) -> list[Card]:
    """Return the cards due for a learner, oldest first.

    Args:
        session: Database session.
        user_id: The learner to select for.
        deck_id: Optional deck to restrict to.
        limit: Maximum number of cards; None means no cap.
        now: Reference time (defaults to utcnow).
        owner_id: Optional deck owner to restrict to.

    Returns:
        Never-studied and overdue cards in ascending id order. Cards scheduled
        after ``now`` are excluded.
    """
    if limit is not None and limit <= 0:
        return []

    query = due_cards_query(user_id, deck_id=deck_id, owner_id=owner_id, now=now)
    query = query.order_by(Card.id.asc())
    if limit is not None:
        query = query.limit(limit)

    result = await session.execute(query)
    cards = list(result.scalars().all())

    logger.debug(
        "Selected %d due cards for user %s (deck=%s, limit=%s)",
        len(cards),
        user_id,
        deck_id,
        limit,
    )
    return cards


async def page_due(
    session: AsyncSession,
    user_id: str,
    deck_id: str | None = None,
    cursor: str | None = None,
    limit: int | None = None,
    now: datetime | None = None,
    owner_id: str | None = None,
) -> Page[Card]:
    """Page through a learner's due cards with the shared cursor pager.

    Unlike ``select_due`` the page size is clamped and ``total`` counts every
    due card, so callers can show "n of total" and resume with the cursor.
    """
    query = due_cards_query(user_id, deck_id=deck_id, owner_id=owner_id, now=now)
    return await paginate(session, query, Card.id, cursor=cursor, limit=limit)


async def count_due(
    session: AsyncSession,
    user_id: str,
    deck_id: str | None = None,
    now: datetime | None = None,
    owner_id: str | None = None,
) -> int:
    """Count the cards ``select_due`` would return without a limit."""
    query = due_cards_query(user_id, deck_id=deck_id, owner_id=owner_id, now=now)
    count_query = select(func.count()).select_from(query.subquery())
    return (await session.execute(count_query)).scalar_one()


async def count_due_by_deck(
    session: AsyncSession,
    user_id: str,
    deck_ids: list[str],
    now: datetime | None = None,
) -> dict[str, int]:
    """Count due cards per deck in one grouped query. Decks with none are omitted."""
    if not deck_ids:
        return {}
    now = now or utcnow()
    query = (
        select(Card.deck_id, func.count(Card.id))
        .outerjoin(LearningState, learning_state_join(user_id))
        .where(Card.deck_id.in_(deck_ids), due_predicate(now))
        .group_by(Card.deck_id)
    )
    result = await session.execute(query)
    return {deck_id: count for deck_id, count in result.all()}
