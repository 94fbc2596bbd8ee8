"""Identifier generation.

Every entity id is a version-7 UUID rendered as a string. v7 ids embed a
millisecond timestamp in their leading bits and ``uuid6.uuid7`` keeps them
monotonic within a process, so ordering rows by ``id`` is creation order.
The pager and the due-card selector rely on that.
"""

from uuid6 import uuid7


def new_id() -> str:
    """Return a new time-ordered identifier."""
    return str(uuid7())
