"""Card persistence, listing and review history."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.errors import NotFoundCardError, NotFoundDeckError
from backend.models.card import Card
from backend.models.deck import Deck
from backend.models.review_event import ReviewEvent
from backend.pagination import Page, paginate

logger = logging.getLogger(__name__)


async def create_card(
    session: AsyncSession,
    deck_id: str,
    front_content: str,
    back_content: str,
) -> Card:
    """Add a card to a deck. Both sides must contain non-blank text."""
    front_content = front_content.strip()
    back_content = back_content.strip()
    if not front_content or not back_content:
        raise ValueError("Card front and back must not be empty")

    if await session.get(Deck, deck_id) is None:
        raise NotFoundDeckError(deck_id)

    card = Card(deck_id=deck_id, front_content=front_content, back_content=back_content)
    session.add(card)
    await session.commit()
    await session.refresh(card)

    logger.info("Created card %s in deck %s", card.id, deck_id)
    return card


async def get_card(session: AsyncSession, card_id: str) -> Card:
    card = await session.get(Card, card_id)
    if card is None:
        raise NotFoundCardError(card_id)
    return card


async def delete_card(session: AsyncSession, card_id: str) -> None:
    """Delete a card; its learning states and review events cascade."""
    result = await session.execute(delete(Card).where(Card.id == card_id))
    if result.rowcount == 0:
        await session.rollback()
        raise NotFoundCardError(card_id)
    await session.commit()
    logger.info("Deleted card %s", card_id)


async def list_cards(
    session: AsyncSession,
    deck_id: str,
    cursor: str | None = None,
    limit: int | None = None,
) -> Page[Card]:
    """Page through a deck's cards in creation order."""
    query = select(Card).where(Card.deck_id == deck_id)
    return await paginate(session, query, Card.id, cursor=cursor, limit=limit)


async def review_history(
    session: AsyncSession,
    card_id: str,
    user_id: str,
    limit: int | None = None,
) -> list[ReviewEvent]:
    """Return a learner's review events for a card, newest first."""
    query = (
        select(ReviewEvent)
        .where(ReviewEvent.card_id == card_id, ReviewEvent.studied_by == user_id)
        .order_by(ReviewEvent.studied_at.desc(), ReviewEvent.id.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    result = await session.execute(query)
    return list(result.scalars().all())
