from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import DuplicateError
from src.modules.users.models import User
from src.modules.users.schemas import UserCreate


class UserService:
    """Service for team member operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> User | None:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email."""
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_users(self, search: str | None = None) -> list[User]:
        """List all users ordered by name, optionally filtered by name/email."""
        stmt = select(User)
        if search:
            search_term = f"%{search}%"
            stmt = stmt.where(or_(User.name.ilike(search_term), User.email.ilike(search_term)))
        result = await self.session.execute(stmt.order_by(User.name, User.id))
        return list(result.scalars().all())

    async def create(self, data: UserCreate) -> User:
        """Create a new team member."""
        existing = await self.get_by_email(data.email)
        if existing:
            raise DuplicateError("User", "email", data.email)

        user = User(name=data.name, email=data.email, role=data.role, is_active=True)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user
