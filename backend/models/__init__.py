"""SQLAlchemy ORM models for the flashcards database."""

from backend.models.base import Base
from backend.models.card import Card
from backend.models.deck import Deck
from backend.models.learning_state import LearningState
from backend.models.review_event import ReviewEvent
from backend.models.user import User

__all__ = ["Base", "Card", "Deck", "LearningState", "ReviewEvent", "User"]
