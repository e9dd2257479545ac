from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.core.exceptions import NotFoundError
from src.modules.users.schemas import UserCreate, UserResponse
from src.modules.users.service import UserService
from src.shared.schemas import ApiResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=ApiResponse[list[UserResponse]])
async def list_users(
    search: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """List team members (flat list, used for uploader names)."""
    users = await UserService(db).list_users(search)
    return ApiResponse(success=True, data=[UserResponse.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    """Get user by ID."""
    user = await UserService(db).get_by_id(user_id)
    if not user:
        raise NotFoundError("User", user_id)
    return ApiResponse(data=UserResponse.model_validate(user), message="User retrieved")


@router.post("", response_model=ApiResponse[UserResponse], status_code=201)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Create a team member."""
    user = await UserService(db).create(data)
    return ApiResponse(data=UserResponse.model_validate(user), message="User created successfully")
