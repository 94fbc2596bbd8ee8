"""API routes for learner statistics and dashboard data."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.deps import get_current_user_id
from backend.api.schemas import LearnerStatsResponse
from backend.database import get_session
from backend.srs.stats import learner_stats

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("", response_model=LearnerStatsResponse)
async def get_learner_stats(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> LearnerStatsResponse:
    """Get overall statistics for the calling learner."""
    stats = await learner_stats(db, user_id)
    return LearnerStatsResponse(
        total_decks=stats.total_decks,
        total_cards=stats.total_cards,
        cards_due=stats.cards_due,
        cards_new=stats.cards_new,
        cards_mature=stats.cards_mature,
        total_reviews=stats.total_reviews,
        average_retention=stats.average_retention,
        streak_days=stats.streak_days,
    )
