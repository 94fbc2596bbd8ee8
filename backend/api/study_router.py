"""API routes for studying: due cards, review submission and history."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.deps import get_current_user_id, get_owned_deck, page_metadata
from backend.api.schemas import (
    CardListResponse,
    CardResponse,
    ReviewEventResponse,
    ReviewHistoryResponse,
    StudyCardsResponse,
    StudyRequest,
    StudyResponse,
)
from backend.config import settings
from backend.database import get_session
from backend.errors import NotFoundCardError
from backend.srs.due import page_due, select_due
from backend.srs.review import record_review
from backend.store.cards import get_card, review_history

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["study"])


@router.get("/decks/{deck_id}/study/cards", response_model=StudyCardsResponse)
async def study_cards_for_deck(
    deck_id: str,
    limit: int | None = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> StudyCardsResponse:
    """Cards in a deck that are new to the caller or whose review date has come."""
    limit = settings.default_study_limit if limit is None else limit
    logger.info("Fetching study cards for deck %s (user=%s, limit=%d)", deck_id, user_id, limit)
    await get_owned_deck(db, deck_id, user_id)
    cards = await select_due(db, user_id, deck_id=deck_id, limit=limit)
    return StudyCardsResponse(cards=[CardResponse.model_validate(card) for card in cards])


@router.get("/study/cards", response_model=StudyCardsResponse)
async def study_cards(
    limit: int | None = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> StudyCardsResponse:
    """Due cards across all of the caller's decks."""
    limit = settings.default_study_limit if limit is None else limit
    cards = await select_due(db, user_id, limit=limit, owner_id=user_id)
    return StudyCardsResponse(cards=[CardResponse.model_validate(card) for card in cards])


@router.get("/study/due", response_model=CardListResponse)
async def study_due_page(
    deck_id: str | None = None,
    cursor: str | None = None,
    limit: int | None = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> CardListResponse:
    """Page through every due card in the caller's decks, with the total due."""
    if deck_id is not None:
        await get_owned_deck(db, deck_id, user_id)
    page = await page_due(
        db, user_id, deck_id=deck_id, cursor=cursor, limit=limit, owner_id=user_id
    )
    return CardListResponse(
        data=[CardResponse.model_validate(card) for card in page.items],
        metadata=page_metadata(page),
    )


@router.post("/decks/{deck_id}/cards/{card_id}/study", response_model=StudyResponse)
async def study_record(
    deck_id: str,
    card_id: str,
    request: StudyRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> StudyResponse:
    """Record a review and return when the card is next due."""
    logger.info(
        "Recording study result (user=%s, deck=%s, card=%s, grade=%d)",
        user_id,
        deck_id,
        card_id,
        request.grade,
    )
    await get_owned_deck(db, deck_id, user_id)
    outcome = await record_review(
        db,
        card_id=card_id,
        user_id=user_id,
        grade=request.grade,
        studied_at=request.studied_at,
        deck_id=deck_id,
    )
    return StudyResponse(
        next_study_date=outcome.progress.next_study_date,
        ease_factor=outcome.progress.ease_factor,
        interval=outcome.progress.interval,
    )


@router.get("/decks/{deck_id}/cards/{card_id}/history", response_model=ReviewHistoryResponse)
async def study_history(
    deck_id: str,
    card_id: str,
    limit: int | None = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ReviewHistoryResponse:
    """The caller's past reviews of a card, newest first."""
    await get_owned_deck(db, deck_id, user_id)
    card = await get_card(db, card_id)
    if card.deck_id != deck_id:
        raise NotFoundCardError(card_id)
    events = await review_history(db, card_id, user_id, limit=limit)
    return ReviewHistoryResponse(events=[ReviewEventResponse.model_validate(e) for e in events])
