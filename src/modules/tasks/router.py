from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.modules.tasks.schemas import TaskCreate, TaskResponse, TaskUpdate
from src.modules.tasks.service import TaskService
from src.shared.schemas import ApiResponse

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get("", response_model=ApiResponse[list[TaskResponse]])
async def list_tasks(
    project_id: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """List tasks. Pass project_id to get one project's tasks."""
    tasks = await TaskService(db).list_tasks(project_id)
    return ApiResponse(success=True, data=[TaskResponse.model_validate(t) for t in tasks])


@router.get("/{task_id}", response_model=ApiResponse[TaskResponse])
async def get_task(task_id: int, db: AsyncSession = Depends(get_db)):
    task = await TaskService(db).get_or_404(task_id)
    return ApiResponse(data=TaskResponse.model_validate(task))


@router.post("", response_model=ApiResponse[TaskResponse], status_code=201)
async def create_task(data: TaskCreate, db: AsyncSession = Depends(get_db)):
    task = await TaskService(db).create(data)
    return ApiResponse(data=TaskResponse.model_validate(task), message="Task created")


@router.patch("/{task_id}", response_model=ApiResponse[TaskResponse])
async def update_task(task_id: int, data: TaskUpdate, db: AsyncSession = Depends(get_db)):
    """Partial update (title, description, priority, completed)."""
    task = await TaskService(db).update(task_id, data)
    return ApiResponse(data=TaskResponse.model_validate(task), message="Task updated")
