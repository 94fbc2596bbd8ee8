"""Tests for recording reviews."""

import asyncio
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.errors import NotFoundCardError, NotFoundDeckError, NotFoundUserError
from backend.models import Deck, LearningState, ReviewEvent, User
from backend.srs.review import record_review
from backend.srs.sm2 import INITIAL_EASE_FACTOR, MAX_INTERVAL, Grade
from backend.store.cards import create_card, review_history
from backend.store.decks import create_deck
from backend.store.learning_states import get_learning_state

STUDIED_AT = datetime(2023, 5, 1, 8, 0)


@pytest.mark.asyncio
async def test_first_review_creates_state_and_event(
    db: AsyncSession, user: User, deck: Deck
) -> None:
    card = await create_card(db, deck.id, "hola", "hello")
    assert await get_learning_state(db, card.id, user.id) is None

    outcome = await record_review(db, card.id, user.id, Grade.FORGOT, studied_at=STUDIED_AT)

    assert outcome.deck_id == deck.id
    assert outcome.progress.interval == 1
    assert outcome.progress.ease_factor == INITIAL_EASE_FACTOR
    assert outcome.progress.next_study_date == STUDIED_AT + timedelta(days=1)

    state = await get_learning_state(db, card.id, user.id)
    assert state is not None
    assert state.interval == 1
    assert state.next_study_date == STUDIED_AT + timedelta(days=1)

    events = await review_history(db, card.id, user.id)
    assert [(e.id, e.grade, e.studied_at) for e in events] == [
        (outcome.event_id, 0, STUDIED_AT)
    ]


@pytest.mark.asyncio
async def test_later_reviews_update_state_in_place(
    db: AsyncSession, user: User, deck: Deck
) -> None:
    card = await create_card(db, deck.id, "hola", "hello")
    first = await record_review(db, card.id, user.id, Grade.PERFECT, studied_at=STUDIED_AT)
    second = await record_review(
        db, card.id, user.id, Grade.PERFECT, studied_at=first.progress.next_study_date
    )

    assert (first.progress.interval, second.progress.interval) == (1, 3)
    assert second.progress.next_study_date == datetime(2023, 5, 5, 8, 0)

    states = (
        await db.execute(select(func.count()).select_from(LearningState))
    ).scalar_one()
    assert states == 1
    history = await review_history(db, card.id, user.id)
    assert [e.id for e in history] == [second.event_id, first.event_id]


@pytest.mark.asyncio
async def test_aware_review_time_stored_as_utc(db: AsyncSession, user: User, deck: Deck) -> None:
    card = await create_card(db, deck.id, "hola", "hello")
    studied_at = datetime(2023, 5, 1, 23, 30, tzinfo=timezone(timedelta(hours=-4)))

    outcome = await record_review(db, card.id, user.id, Grade.GOOD, studied_at=studied_at)

    assert outcome.progress.next_study_date == studied_at + timedelta(days=1)
    state = await get_learning_state(db, card.id, user.id)
    assert state.next_study_date == datetime(2023, 5, 3, 3, 30)
    [event] = await review_history(db, card.id, user.id)
    assert event.studied_at == datetime(2023, 5, 2, 3, 30)


@pytest.mark.asyncio
async def test_dst_change_stored_as_utc(db: AsyncSession, user: User, deck: Deck) -> None:
    card = await create_card(db, deck.id, "hola", "hello")
    new_york = ZoneInfo("America/New_York")
    await record_review(db, card.id, user.id, Grade.PERFECT, studied_at=STUDIED_AT)

    reviewed_at = datetime(2023, 3, 10, 9, 0, tzinfo=new_york)
    outcome = await record_review(db, card.id, user.id, Grade.PERFECT, studied_at=reviewed_at)

    assert outcome.progress.next_study_date == datetime(2023, 3, 13, 9, 0, tzinfo=new_york)
    state = await get_learning_state(db, card.id, user.id)
    assert state.next_study_date == datetime(2023, 3, 13, 13, 0)
    assert state.next_study_date - datetime(2023, 3, 10, 14, 0) == timedelta(hours=71)


@pytest.mark.asyncio
async def test_long_perfect_streak_keeps_reviewing(
    db: AsyncSession, user: User, deck: Deck
) -> None:
    card = await create_card(db, deck.id, "hola", "hello")
    studied_at = STUDIED_AT
    for _ in range(25):
        outcome = await record_review(db, card.id, user.id, Grade.PERFECT, studied_at=studied_at)
        studied_at = outcome.progress.next_study_date

    assert outcome.progress.interval == MAX_INTERVAL
    state = await get_learning_state(db, card.id, user.id)
    assert state.interval == MAX_INTERVAL
    assert len(await review_history(db, card.id, user.id)) == 25


@pytest.mark.asyncio
async def test_missing_card(db: AsyncSession, user: User) -> None:
    with pytest.raises(NotFoundCardError) as exc_info:
        await record_review(db, "missing", user.id, Grade.GOOD)
    assert exc_info.value.card_id == "missing"


@pytest.mark.asyncio
async def test_missing_user(db: AsyncSession, deck: Deck) -> None:
    card = await create_card(db, deck.id, "hola", "hello")
    with pytest.raises(NotFoundUserError):
        await record_review(db, card.id, "nobody", Grade.GOOD)
    assert (await db.execute(select(func.count()).select_from(ReviewEvent))).scalar_one() == 0


@pytest.mark.asyncio
async def test_card_outside_deck(db: AsyncSession, user: User, deck: Deck) -> None:
    card = await create_card(db, deck.id, "hola", "hello")
    other_deck = await create_deck(db, user.id, "French")
    with pytest.raises(NotFoundDeckError):
        await record_review(db, card.id, user.id, Grade.GOOD, deck_id=other_deck.id)
    assert await get_learning_state(db, card.id, user.id) is None


@pytest.mark.asyncio
async def test_concurrent_reviews_are_serialized(
    session_factory: async_sessionmaker[AsyncSession], db: AsyncSession, user: User, deck: Deck
) -> None:
    card = await create_card(db, deck.id, "hola", "hello")

    async def review() -> None:
        async with session_factory() as session:
            await record_review(session, card.id, user.id, Grade.GOOD, studied_at=STUDIED_AT)

    await asyncio.gather(review(), review())

    async with session_factory() as session:
        state = await get_learning_state(session, card.id, user.id)
        events = await review_history(session, card.id, user.id)
    # The second review saw the first one's state: 0 -> 1 -> 3
    assert state.interval == 3
    assert len(events) == 2
