"""Domain errors raised by the store, selector and review functions.

The API layer maps ``NotFoundError`` to 404 and ``DuplicateError`` to 409.
Storage failures are not wrapped; they surface as ``SQLAlchemyError``.
"""


class FlashcardError(Exception):
    """Base class for domain errors."""


class NotFoundError(FlashcardError):
    """A referenced entity does not exist."""

    entity = "entity"

    def __init__(self, entity_id: str) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity} not found: {entity_id}")


class NotFoundCardError(NotFoundError):
    entity = "card"

    @property
    def card_id(self) -> str:
        return self.entity_id


class NotFoundDeckError(NotFoundError):
    entity = "deck"

    @property
    def deck_id(self) -> str:
        return self.entity_id


class NotFoundUserError(NotFoundError):
    entity = "user"

    @property
    def user_id(self) -> str:
        return self.entity_id


class DuplicateError(FlashcardError):
    """An entity with the same identity already exists."""

    entity = "entity"

    def __init__(self, entity_id: str) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity} already exists: {entity_id}")


class DuplicateUserError(DuplicateError):
    entity = "user"
