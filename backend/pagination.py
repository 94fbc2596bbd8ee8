"""Cursor pagination shared by every list endpoint.

Pages are keyed on the row id. Ids are UUIDv7 strings, so ascending id order
is creation order and ``id > cursor`` resumes exactly after the last row a
caller saw. No state is kept between calls: the cursor token carries it.
"""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from backend.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of results plus what is needed to fetch the next one."""

    items: list[T] = field(default_factory=list)
    total: int = 0  # Rows matching the filter, regardless of cursor position
    limit: int = 0  # Effective page size after clamping
    next_cursor: str | None = None  # None on the final page

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None


def clamp_limit(limit: int | None) -> int:
    """Clamp a requested page size into [1, max_page_limit].

    Missing or non-positive values fall back to the default; oversized values
    are capped. Out-of-range limits never raise.
    """
    if limit is None or limit <= 0:
        return settings.default_page_limit
    return min(limit, settings.max_page_limit)


def encode_cursor(key: str) -> str:
    """Wrap a row key into an opaque, URL-safe cursor token."""
    return base64.urlsafe_b64encode(key.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(token: str) -> str:
    """Recover the row key from a cursor token.

    Tokens we did not issue are not rejected: anything that does not round-trip
    through ``encode_cursor`` is used verbatim as the key, which at worst
    yields an empty or partial page.
    """
    try:
        padded = token + "=" * (-len(token) % 4)
        key = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except ValueError:  # includes binascii.Error and unicode errors
        return token
    if encode_cursor(key) != token:
        return token
    return key


async def paginate(
    session: AsyncSession,
    query: Select[Any],
    key: InstrumentedAttribute[str],
    cursor: str | None = None,
    limit: int | None = None,
) -> Page[Any]:
    """Fetch one page of ``query`` ordered by ``key``.

    Fetches one row more than the page size to learn whether another page
    exists, then counts the whole filtered set separately for ``total``.

    Args:
        session: Database session.
        query: A select of ORM entities with the caller's filters applied and
            no ordering or limit.
        key: The unique, sortable column to page on (normally ``Model.id``).
        cursor: Token returned as ``next_cursor`` by the previous page.
        limit: Requested page size (clamped, see ``clamp_limit``).

    Returns:
        A Page of entities in ascending key order.
    """
    page_size = clamp_limit(limit)

    page_query = query
    if cursor:
        page_query = page_query.where(key > decode_cursor(cursor))
    page_query = page_query.order_by(key.asc()).limit(page_size + 1)

    result = await session.execute(page_query)
    items = list(result.scalars().all())

    next_cursor = None
    if len(items) > page_size:
        items = items[:page_size]
        next_cursor = encode_cursor(getattr(items[-1], key.key))

    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await session.execute(count_query)).scalar_one()

    logger.debug(
        "Paged %s: %d items (limit %d, total %d, more=%s)",
        key,
        len(items),
        page_size,
        total,
        next_cursor is not None,
    )
    return Page(items=items, total=total, limit=page_size, next_cursor=next_cursor)
