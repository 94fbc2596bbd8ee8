"""Deck persistence and listing."""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.errors import NotFoundDeckError, NotFoundUserError
from backend.models.card import Card
from backend.models.deck import Deck
from backend.models.user import User
from backend.pagination import Page, paginate
from backend.srs.due import count_due_by_deck

logger = logging.getLogger(__name__)


@dataclass
class DeckSummary:
    """A deck with its card counts for the listing owner."""

    deck: Deck
    total_cards: int
    due_cards: int


async def create_deck(
    session: AsyncSession,
    user_id: str,
    name: str,
    description: str = "",
) -> Deck:
    """Create a deck owned by ``user_id``."""
    if await session.get(User, user_id) is None:
        raise NotFoundUserError(user_id)

    deck = Deck(user_id=user_id, name=name, description=description)
    session.add(deck)
    await session.commit()
    await session.refresh(deck)

    logger.info("Created deck %s for user %s", deck.id, user_id)
    return deck


async def get_deck(session: AsyncSession, deck_id: str) -> Deck:
    deck = await session.get(Deck, deck_id)
    if deck is None:
        raise NotFoundDeckError(deck_id)
    return deck


async def delete_deck(session: AsyncSession, deck_id: str) -> None:
    """Delete a deck; its cards, learning states and review events cascade."""
    result = await session.execute(delete(Deck).where(Deck.id == deck_id))
    if result.rowcount == 0:
        await session.rollback()
        raise NotFoundDeckError(deck_id)
    await session.commit()
    logger.info("Deleted deck %s", deck_id)


async def list_decks(
    session: AsyncSession,
    user_id: str,
    cursor: str | None = None,
    limit: int | None = None,
    now: datetime | None = None,
) -> Page[DeckSummary]:
    """Page through a user's decks, annotating each with card and due counts."""
    query = select(Deck).where(Deck.user_id == user_id)
    page = await paginate(session, query, Deck.id, cursor=cursor, limit=limit)

    deck_ids = [deck.id for deck in page.items]
    total_by_deck: dict[str, int] = {}
    if deck_ids:
        totals = await session.execute(
            select(Card.deck_id, func.count(Card.id))
            .where(Card.deck_id.in_(deck_ids))
            .group_by(Card.deck_id)
        )
        total_by_deck = {deck_id: count for deck_id, count in totals.all()}
    due_by_deck = await count_due_by_deck(session, user_id, deck_ids, now=now)

    summaries = [
        DeckSummary(
            deck=deck,
            total_cards=total_by_deck.get(deck.id, 0),
            due_cards=due_by_deck.get(deck.id, 0),
        )
        for deck in page.items
    ]
    return Page(items=summaries, total=page.total, limit=page.limit, next_cursor=page.next_cursor)
