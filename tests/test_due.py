"""Tests for due-card selection."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from backend.models import Deck, User
from backend.srs.due import count_due, count_due_by_deck, page_due, select_due
from backend.srs.review import record_review
from backend.srs.sm2 import Grade
from backend.store.cards import create_card
from backend.store.decks import create_deck

NOW = datetime(2024, 3, 1, 12, 0)


@pytest.mark.asyncio
async def test_new_cards_are_due_in_creation_order(
    db: AsyncSession, user: User, deck: Deck
) -> None:
    ids = [(await create_card(db, deck.id, f"q{i}", f"a{i}")).id for i in range(3)]
    cards = await select_due(db, user.id, deck_id=deck.id, now=NOW)
    assert [c.id for c in cards] == sorted(ids)


@pytest.mark.asyncio
async def test_reviewed_card_waits_for_its_date(db: AsyncSession, user: User, deck: Deck) -> None:
    card = await create_card(db, deck.id, "hola", "hello")
    await record_review(db, card.id, user.id, Grade.GOOD, studied_at=NOW)

    assert await select_due(db, user.id, deck_id=deck.id, now=NOW) == []
    assert await select_due(db, user.id, deck_id=deck.id, now=NOW + timedelta(hours=23)) == []

    due = await select_due(db, user.id, deck_id=deck.id, now=NOW + timedelta(days=1))
    assert [c.id for c in due] == [card.id]


@pytest.mark.asyncio
async def test_schedule_is_per_learner(
    db: AsyncSession, user: User, other_user: User, deck: Deck
) -> None:
    card = await create_card(db, deck.id, "hola", "hello")
    await record_review(db, card.id, user.id, Grade.PERFECT, studied_at=NOW)

    assert await select_due(db, user.id, deck_id=deck.id, now=NOW) == []
    other = await select_due(db, other_user.id, deck_id=deck.id, now=NOW)
    assert [c.id for c in other] == [card.id]


@pytest.mark.asyncio
async def test_limit(db: AsyncSession, user: User, deck: Deck) -> None:
    for i in range(5):
        await create_card(db, deck.id, f"q{i}", f"a{i}")

    assert len(await select_due(db, user.id, deck_id=deck.id, limit=2, now=NOW)) == 2
    assert len(await select_due(db, user.id, deck_id=deck.id, limit=None, now=NOW)) == 5
    assert await select_due(db, user.id, deck_id=deck.id, limit=0, now=NOW) == []


@pytest.mark.asyncio
async def test_deck_and_owner_filters(
    db: AsyncSession, user: User, other_user: User, deck: Deck
) -> None:
    other_deck = await create_deck(db, other_user.id, "French")
    mine = await create_card(db, deck.id, "hola", "hello")
    theirs = await create_card(db, other_deck.id, "bonjour", "hello")

    everything = await select_due(db, user.id, now=NOW)
    assert {c.id for c in everything} == {mine.id, theirs.id}

    owned = await select_due(db, user.id, owner_id=user.id, now=NOW)
    assert [c.id for c in owned] == [mine.id]

    in_deck = await select_due(db, user.id, deck_id=other_deck.id, now=NOW)
    assert [c.id for c in in_deck] == [theirs.id]


@pytest.mark.asyncio
async def test_counts_match_selection(db: AsyncSession, user: User, deck: Deck) -> None:
    cards = [await create_card(db, deck.id, f"q{i}", f"a{i}") for i in range(4)]
    await record_review(db, cards[0].id, user.id, Grade.PERFECT, studied_at=NOW)
    second_deck = await create_deck(db, user.id, "Empty")

    assert await count_due(db, user.id, deck_id=deck.id, now=NOW) == 3
    assert await count_due(db, user.id, deck_id=deck.id, now=NOW) == len(
        await select_due(db, user.id, deck_id=deck.id, now=NOW)
    )
    by_deck = await count_due_by_deck(db, user.id, [deck.id, second_deck.id], now=NOW)
    assert by_deck == {deck.id: 3}
    assert await count_due_by_deck(db, user.id, [], now=NOW) == {}


@pytest.mark.asyncio
async def test_page_due_hundred_cards_in_ten_pages(
    db: AsyncSession, user: User, deck: Deck
) -> None:
    ids = [(await create_card(db, deck.id, f"q{i}", f"a{i}")).id for i in range(101)]
    # One card is scheduled in the future and drops out of the due set
    await record_review(db, ids[0], user.id, Grade.PERFECT, studied_at=NOW)

    seen: list[str] = []
    cursor = None
    pages = 0
    while True:
        page = await page_due(db, user.id, deck_id=deck.id, cursor=cursor, limit=10, now=NOW)
        pages += 1
        assert page.total == 100
        assert len(page.items) == 10
        seen.extend(card.id for card in page.items)
        if page.next_cursor is None:
            break
        cursor = page.next_cursor

    assert pages == 10
    assert seen == sorted(ids[1:])


@pytest.mark.asyncio
async def test_page_due_oversized_limit_is_clamped(
    db: AsyncSession, user: User, other_user: User, deck: Deck
) -> None:
    for i in range(60):
        await create_card(db, deck.id, f"q{i}", f"a{i}")
    other_deck = await create_deck(db, other_user.id, "French")
    await create_card(db, other_deck.id, "bonjour", "hello")

    page = await page_due(db, user.id, limit=51, now=NOW, owner_id=user.id)
    assert page.limit == 50
    assert len(page.items) == 50
    assert page.total == 60
    assert page.has_more

    rest = await page_due(
        db, user.id, cursor=page.next_cursor, limit=51, now=NOW, owner_id=user.id
    )
    assert len(rest.items) == 10
    assert rest.next_cursor is None
