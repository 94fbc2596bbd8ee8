"""API routes for the cards of a deck."""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.deps import get_current_user_id, get_owned_deck, page_metadata
from backend.api.schemas import CardCreate, CardListResponse, CardResponse
from backend.database import get_session
from backend.errors import NotFoundCardError
from backend.store.cards import create_card, delete_card, get_card, list_cards

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/decks/{deck_id}/cards", tags=["cards"])


@router.post("", response_model=CardResponse, status_code=201)
async def card_create(
    deck_id: str,
    request: CardCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> CardResponse:
    """Add a card to one of the caller's decks."""
    await get_owned_deck(db, deck_id, user_id)
    card = await create_card(db, deck_id, request.front_content, request.back_content)
    return CardResponse.model_validate(card)


@router.get("", response_model=CardListResponse)
async def card_list(
    deck_id: str,
    cursor: str | None = None,
    limit: int | None = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> CardListResponse:
    """List a deck's cards in creation order."""
    logger.info(
        "Fetching cards for deck %s (user=%s, cursor=%s, limit=%s)", deck_id, user_id, cursor, limit
    )
    await get_owned_deck(db, deck_id, user_id)
    page = await list_cards(db, deck_id, cursor=cursor, limit=limit)
    return CardListResponse(
        data=[CardResponse.model_validate(card) for card in page.items],
        metadata=page_metadata(page),
    )


@router.delete("/{card_id}", status_code=204)
async def card_delete(
    deck_id: str,
    card_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Delete a card together with every learner's state and history for it."""
    await get_owned_deck(db, deck_id, user_id)
    card = await get_card(db, card_id)
    if card.deck_id != deck_id:
        raise NotFoundCardError(card_id)
    await delete_card(db, card_id)
    return Response(status_code=204)
