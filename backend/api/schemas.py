"""Pydantic schemas for API request/response models."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# --- Users ---


class UserCreate(BaseModel):
    email: NonBlankStr
    name: NonBlankStr


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    created_at: datetime


# --- Decks ---


class DeckCreate(BaseModel):
    name: NonBlankStr
    description: str = ""


class DeckResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: str
    created_at: datetime
    updated_at: datetime


class DeckSummaryResponse(DeckResponse):
    """A deck in a listing, with counts for the requesting learner."""

    total_cards: int
    due_cards: int


# --- Cards ---


class CardCreate(BaseModel):
    front_content: NonBlankStr
    back_content: NonBlankStr


class CardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    deck_id: str
    front_content: str
    back_content: str
    created_at: datetime
    updated_at: datetime


# --- Pagination ---


class PageMetadata(BaseModel):
    next_cursor: str | None
    limit: int
    total: int


class DeckListResponse(BaseModel):
    data: list[DeckSummaryResponse]
    metadata: PageMetadata


class CardListResponse(BaseModel):
    data: list[CardResponse]
    metadata: PageMetadata


# --- Study ---


class StudyCardsResponse(BaseModel):
    """Cards due for review, oldest first."""

    cards: list[CardResponse]


class StudyRequest(BaseModel):
    """A learner's self-graded review of one card."""

    grade: int = Field(ge=0, le=3)  # 0=forgot, 1=hard, 2=good, 3=perfect
    studied_at: datetime | None = None  # Defaults to server time


class StudyResponse(BaseModel):
    """Scheduling result after recording a review."""

    next_study_date: datetime
    ease_factor: float
    interval: int


class ReviewEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    card_id: str
    deck_id: str
    grade: int
    studied_at: datetime


class ReviewHistoryResponse(BaseModel):
    events: list[ReviewEventResponse]


# --- Stats ---


class LearnerStatsResponse(BaseModel):
    """Overall statistics for a learner."""

    total_decks: int
    total_cards: int
    cards_due: int
    cards_new: int
    cards_mature: int  # interval >= 21 days
    total_reviews: int
    average_retention: float | None
    streak_days: int
