"""Persistence for per-(card, learner) learning states."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import to_naive_utc
from backend.models.learning_state import LearningState
from backend.srs.sm2 import LearningProgress


async def get_learning_state(
    session: AsyncSession,
    card_id: str,
    user_id: str,
    for_update: bool = False,
) -> LearningState | None:
    """Load a learner's state for a card, or None if never reviewed.

    With ``for_update`` the row is locked until the transaction ends on
    backends that support ``SELECT ... FOR UPDATE`` and is always re-read
    from the database rather than the session's identity map.
    """
    query = select(LearningState).where(
        LearningState.card_id == card_id,
        LearningState.user_id == user_id,
    )
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await session.execute(query)
    return result.scalar_one_or_none()


def to_progress(state: LearningState) -> LearningProgress:
    return LearningProgress(
        ease_factor=state.ease_factor,
        interval=state.interval,
        next_study_date=state.next_study_date,
    )


async def upsert_learning_state(
    session: AsyncSession,
    card_id: str,
    user_id: str,
    progress: LearningProgress,
    existing: LearningState | None = None,
) -> LearningState:
    """Write ``progress`` as the learner's state for the card.

    Updates the existing row in place (it is never recreated) or inserts the
    first one. Does not commit.
    """
    state = existing
    if state is None:
        state = await get_learning_state(session, card_id, user_id)
    if state is None:
        state = LearningState(card_id=card_id, user_id=user_id)
        session.add(state)

    state.ease_factor = progress.ease_factor
    state.interval = progress.interval
    state.next_study_date = to_naive_utc(progress.next_study_date)
    await session.flush()
    return state
