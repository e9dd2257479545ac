from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError, ValidationError
from src.modules.projects.service import ProjectService
from src.modules.tasks.models import Task
from src.modules.tasks.schemas import TaskCreate, TaskUpdate


class TaskService:
    """Service for task operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, task_id: int) -> Task | None:
        result = await self.db.execute(select(Task).where(Task.id == task_id))
        return result.scalar_one_or_none()

    async def get_or_404(self, task_id: int) -> Task:
        task = await self.get_by_id(task_id)
        if not task:
            raise NotFoundError("Task", task_id)
        return task

    async def list_tasks(self, project_id: int | None = None) -> list[Task]:
        stmt = select(Task)
        if project_id is not None:
            stmt = stmt.where(Task.project_id == project_id)
        result = await self.db.execute(stmt.order_by(Task.id))
        return list(result.scalars().all())

    async def create(self, data: TaskCreate) -> Task:
        if data.project_id is not None:
            await ProjectService(self.db).get_or_404(data.project_id)
        task = Task(
            title=data.title,
            project_id=data.project_id,
            description=data.description,
            assigned_to=data.assigned_to,
            priority=data.priority,
            completed=False,
        )
        self.db.add(task)
        await self.db.flush()
        await self.db.refresh(task)
        return task

    async def update(self, task_id: int, data: TaskUpdate) -> Task:
        """
        Apply a partial update.

        Completing a task stamps completion_date; reopening clears it.
        """
        task = await self.get_or_404(task_id)
        changes = data.model_dump(exclude_unset=True)
        if "title" in changes:
            title = (changes["title"] or "").strip()
            if not title:
                raise ValidationError("Task title is required", field="title")
            task.title = title
        if "description" in changes:
            task.description = changes["description"]
        if changes.get("priority"):
            task.priority = changes["priority"]
        if changes.get("completed") is not None and changes["completed"] != task.completed:
            task.completed = changes["completed"]
            task.completion_date = datetime.now(timezone.utc) if task.completed else None

        await self.db.flush()
        await self.db.refresh(task)
        return task
