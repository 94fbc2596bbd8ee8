"""API routes for learners."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.schemas import UserCreate, UserResponse
from backend.database import get_session
from backend.store.users import create_user

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=201)
async def user_create(
    request: UserCreate,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Register a learner."""
    user = await create_user(db, request.email, request.name)
    return UserResponse.model_validate(user)
