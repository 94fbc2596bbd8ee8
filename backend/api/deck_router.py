"""API routes for decks."""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.deps import get_current_user_id, get_owned_deck, page_metadata
from backend.api.schemas import DeckCreate, DeckListResponse, DeckResponse, DeckSummaryResponse
from backend.database import get_session
from backend.store.decks import create_deck, delete_deck, list_decks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/decks", tags=["decks"])


@router.post("", response_model=DeckResponse, status_code=201)
async def deck_create(
    request: DeckCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> DeckResponse:
    """Create a deck owned by the caller."""
    deck = await create_deck(db, user_id, request.name, request.description)
    return DeckResponse.model_validate(deck)


@router.get("", response_model=DeckListResponse)
async def deck_list(
    cursor: str | None = None,
    limit: int | None = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> DeckListResponse:
    """List the caller's decks, oldest first, with total and due card counts."""
    logger.info("Fetching decks for user %s (cursor=%s, limit=%s)", user_id, cursor, limit)
    page = await list_decks(db, user_id, cursor=cursor, limit=limit)
    data = [
        DeckSummaryResponse(
            **DeckResponse.model_validate(summary.deck).model_dump(),
            total_cards=summary.total_cards,
            due_cards=summary.due_cards,
        )
        for summary in page.items
    ]
    return DeckListResponse(data=data, metadata=page_metadata(page))


@router.get("/{deck_id}", response_model=DeckResponse)
async def deck_get(
    deck_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> DeckResponse:
    deck = await get_owned_deck(db, deck_id, user_id)
    return DeckResponse.model_validate(deck)


@router.delete("/{deck_id}", status_code=204)
async def deck_delete(
    deck_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Delete a deck with all of its cards and study history."""
    await get_owned_deck(db, deck_id, user_id)
    await delete_deck(db, deck_id)
    return Response(status_code=204)
