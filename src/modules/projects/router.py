from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.modules.projects.schemas import ProjectCreate, ProjectResponse
from src.modules.projects.service import ProjectService
from src.shared.schemas import ApiResponse

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=ApiResponse[list[ProjectResponse]])
async def list_projects(
    client_id: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """List projects. Pass client_id to get one client's projects."""
    projects = await ProjectService(db).list_projects(client_id)
    return ApiResponse(success=True, data=[ProjectResponse.model_validate(p) for p in projects])


@router.get("/{project_id}", response_model=ApiResponse[ProjectResponse])
async def get_project(project_id: int, db: AsyncSession = Depends(get_db)):
    project = await ProjectService(db).get_or_404(project_id)
    return ApiResponse(data=ProjectResponse.model_validate(project))


@router.post("", response_model=ApiResponse[ProjectResponse], status_code=201)
async def create_project(data: ProjectCreate, db: AsyncSession = Depends(get_db)):
    project = await ProjectService(db).create(data)
    return ApiResponse(data=ProjectResponse.model_validate(project), message="Project created")
