"""CLI interface for the flashcard service.

Usage:
    python -m flashcards add-deck "Spanish"           Create a deck
    python -m flashcards add-card DECK_ID "hola" "hi" Add a card to a deck
    python -m flashcards decks                        List your decks
    python -m flashcards due                          Show how many cards are due
    python -m flashcards review                       Start a review session
    python -m flashcards stats                        Show your statistics
"""

import argparse
import asyncio
import logging

from backend.database import async_session, engine
from backend.errors import FlashcardError
from backend.models import Base
from backend.srs.due import page_due, select_due
from backend.srs.review import record_review
from backend.srs.sm2 import Grade, is_successful
from backend.srs.stats import learner_stats
from backend.store.cards import create_card
from backend.store.decks import create_deck, get_deck, list_decks
from backend.store.users import create_user, get_user_by_email

logger = logging.getLogger(__name__)

DEFAULT_LEARNER_EMAIL = "learner@localhost"
DEFAULT_LEARNER_NAME = "Local learner"


async def ensure_db() -> None:
    """Create tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ensure_learner() -> str:
    """Ensure there's a default learner and return the ID."""
    async with async_session() as db:
        learner = await get_user_by_email(db, DEFAULT_LEARNER_EMAIL)
        if learner:
            return learner.id
        learner = await create_user(db, DEFAULT_LEARNER_EMAIL, DEFAULT_LEARNER_NAME)
        return learner.id


async def cmd_add_deck(args: argparse.Namespace) -> None:
    """Create a deck for the local learner."""
    await ensure_db()
    learner_id = await ensure_learner()

    async with async_session() as db:
        deck = await create_deck(db, learner_id, args.name, args.description)
    print(f"  Created deck '{deck.name}' (id={deck.id})")


async def cmd_add_card(args: argparse.Namespace) -> None:
    """Add a card to one of the local learner's decks."""
    await ensure_db()
    await ensure_learner()

    async with async_session() as db:
        card = await create_card(db, args.deck_id, args.front, args.back)
    print(f"  Added card {card.id} (ready for review)")


async def cmd_decks(args: argparse.Namespace) -> None:
    """List decks with card counts."""
    await ensure_db()
    learner_id = await ensure_learner()

    async with async_session() as db:
        cursor = None
        rows = []
        while True:
            page = await list_decks(db, learner_id, cursor=cursor)
            rows.extend(page.items)
            if not page.has_more:
                break
            cursor = page.next_cursor

    if not rows:
        print("  No decks yet. Create one with 'add-deck'.")
        return

    print(f"\n  {'Deck':<30} {'Cards':>6} {'Due':>6}  Id")
    for summary in rows:
        print(
            f"  {summary.deck.name[:30]:<30} {summary.total_cards:>6} "
            f"{summary.due_cards:>6}  {summary.deck.id}"
        )
    print()


async def cmd_due(args: argparse.Namespace) -> None:
    """Show how many cards are due."""
    await ensure_db()
    learner_id = await ensure_learner()

    async with async_session() as db:
        page = await page_due(
            db, learner_id, deck_id=args.deck, limit=args.limit, owner_id=learner_id
        )

    print(f"  {page.total} cards due")
    for card in page.items:
        print(f"    {card.id}  {card.front_content}")
    if page.has_more:
        print(f"    ... and {page.total - len(page.items)} more")


async def cmd_review(args: argparse.Namespace) -> None:
    """Run an interactive review session."""
    await ensure_db()
    learner_id = await ensure_learner()

    async with async_session() as db:
        if args.deck is not None:
            await get_deck(db, args.deck)
        cards = await select_due(
            db, learner_id, deck_id=args.deck, limit=args.max_cards, owner_id=learner_id
        )

        if not cards:
            print("\nNo cards due for review. You're all caught up!")
            return

        print("\n  Review Session")
        print(f"  {len(cards)} cards due\n")
        print("  Grades: 0=Forgot  1=Hard  2=Good  3=Perfect")
        print("  Type 'q' to quit\n")

        reviewed = 0
        passed = 0
        for i, card in enumerate(cards, 1):
            print(f"  [{i}/{len(cards)}]")
            print(f"  {card.front_content}")
            if input("  Press enter to show the answer: ").strip().lower() == "q":
                break
            print(f"  {card.back_content}")

            grade = None
            while grade is None:
                answer = input("  Grade [0-3]: ").strip().lower()
                if answer == "q":
                    break
                if answer.isdigit() and 0 <= int(answer) <= 3:
                    grade = Grade(int(answer))
            if grade is None:
                break

            outcome = await record_review(db, card.id, learner_id, grade)
            reviewed += 1
            if is_successful(grade):
                passed += 1
            print(
                f"  Next review in {outcome.progress.interval} "
                f"day{'s' if outcome.progress.interval != 1 else ''}\n"
            )

    print("\n  Session Complete!")
    print(f"  Reviewed: {reviewed}  Passed: {passed}\n")


async def cmd_stats(args: argparse.Namespace) -> None:
    """Show learner statistics."""
    await ensure_db()
    learner_id = await ensure_learner()

    async with async_session() as db:
        stats = await learner_stats(db, learner_id)

    retention = (
        f"{stats.average_retention * 100:.0f}%" if stats.average_retention is not None else "-"
    )
    print("\n  Flashcard Statistics")
    print(f"  {'Decks:':<20} {stats.total_decks}")
    print(f"  {'Total cards:':<20} {stats.total_cards}")
    print(f"  {'Due now:':<20} {stats.cards_due}")
    print(f"  {'New (unseen):':<20} {stats.cards_new}")
    print(f"  {'Mature (21d+):':<20} {stats.cards_mature}")
    print(f"  {'Total reviews:':<20} {stats.total_reviews}")
    print(f"  {'Retention (30d):':<20} {retention}")
    print(f"  {'Streak:':<20} {stats.streak_days} days")
    print()


def main() -> None:
    """Entry point for the flashcards CLI application."""
    parser = argparse.ArgumentParser(
        prog="flashcards",
        description="Flashcard decks with SM-2 spaced repetition",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # add-deck
    add_deck_parser = subparsers.add_parser("add-deck", help="Create a deck")
    add_deck_parser.add_argument("name", help="Deck name")
    add_deck_parser.add_argument("-d", "--description", default="", help="Deck description")

    # add-card
    add_card_parser = subparsers.add_parser("add-card", help="Add a card to a deck")
    add_card_parser.add_argument("deck_id", help="Deck id (see 'decks')")
    add_card_parser.add_argument("front", help="Prompt side")
    add_card_parser.add_argument("back", help="Answer side")

    # decks
    subparsers.add_parser("decks", help="List your decks")

    # due
    due_parser = subparsers.add_parser("due", help="Show cards due for review")
    due_parser.add_argument("--deck", default=None, help="Only this deck")
    due_parser.add_argument("--limit", type=int, default=20, help="Max cards to list")

    # review
    review_parser = subparsers.add_parser("review", help="Start a review session")
    review_parser.add_argument("--deck", default=None, help="Only this deck")
    review_parser.add_argument("--max-cards", type=int, default=20, help="Max cards per session")

    # stats
    subparsers.add_parser("stats", help="Show your statistics")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not args.command:
        parser.print_help()
        return

    cmd_map = {
        "add-deck": cmd_add_deck,
        "add-card": cmd_add_card,
        "decks": cmd_decks,
        "due": cmd_due,
        "review": cmd_review,
        "stats": cmd_stats,
    }

    try:
        asyncio.run(cmd_map[args.command](args))
    except (FlashcardError, ValueError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        parser.exit(1, f"  Error: {exc}\n")


if __name__ == "__main__":
    main()
