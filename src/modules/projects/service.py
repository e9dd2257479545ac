from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError
from src.modules.clients.service import ClientService
from src.modules.projects.models import Project
from src.modules.projects.schemas import ProjectCreate


class ProjectService:
    """Service for project operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, project_id: int) -> Project | None:
        result = await self.db.execute(select(Project).where(Project.id == project_id))
        return result.scalar_one_or_none()

    async def get_or_404(self, project_id: int) -> Project:
        project = await self.get_by_id(project_id)
        if not project:
            raise NotFoundError("Project", project_id)
        return project

    async def list_projects(self, client_id: int | None = None) -> list[Project]:
        """List projects, optionally only those of one client."""
        stmt = select(Project)
        if client_id is not None:
            stmt = stmt.where(Project.client_id == client_id)
        result = await self.db.execute(stmt.order_by(Project.name, Project.id))
        return list(result.scalars().all())

    async def create(self, data: ProjectCreate) -> Project:
        await ClientService(self.db).get_or_404(data.client_id)
        project = Project(
            name=data.name,
            client_id=data.client_id,
            description=data.description,
            status=data.status.value,
        )
        self.db.add(project)
        await self.db.flush()
        await self.db.refresh(project)
        return project
