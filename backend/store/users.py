import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.errors import DuplicateUserError
from backend.models.user import User

logger = logging.getLogger(__name__)


async def create_user(
    session: AsyncSession,
    email: str,
    name: str,
) -> User:
    """Create a learner. Emails are unique."""
    if await get_user_by_email(session, email) is not None:
        raise DuplicateUserError(email)

    user = User(email=email, name=name)
    session.add(user)
    await session.commit()
    await session.refresh(user)

    logger.info("Created user %s", user.id)
    return user


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()
