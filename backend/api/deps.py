"""Shared request dependencies.

Authentication is handled upstream; requests arrive with the learner's id in
the ``X-User-Id`` header.
"""

from typing import Any

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.schemas import PageMetadata
from backend.database import get_session
from backend.models.deck import Deck
from backend.models.user import User
from backend.pagination import Page
from backend.store.decks import get_deck


async def get_current_user_id(
    x_user_id: str | None = Header(default=None),
    db: AsyncSession = Depends(get_session),
) -> str:
    """Resolve the calling learner, rejecting missing or unknown ids."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    if await db.get(User, x_user_id) is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return x_user_id


async def get_owned_deck(db: AsyncSession, deck_id: str, user_id: str) -> Deck:
    """Load a deck, failing with 404 if missing and 403 if owned by someone else."""
    deck = await get_deck(db, deck_id)
    if deck.user_id != user_id:
        raise HTTPException(status_code=403, detail="You do not have access to this deck")
    return deck


def page_metadata(page: Page[Any]) -> PageMetadata:
    return PageMetadata(next_cursor=page.next_cursor, limit=page.limit, total=page.total)
