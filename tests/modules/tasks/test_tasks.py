import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError, ValidationError
from src.modules.tasks.schemas import TaskCreate, TaskUpdate
from src.modules.tasks.service import TaskService


class TestTaskService:
    """Tests for TaskService."""

    async def test_create_loose_task(self, db_session: AsyncSession):
        task = await TaskService(db_session).create(TaskCreate(title=" Orçamento "))
        assert task.title == "Orçamento"
        assert task.project_id is None
        assert task.completed is False
        assert task.priority == "medium"

    async def test_create_with_unknown_project(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await TaskService(db_session).create(TaskCreate(title="Edição", project_id=5))

    async def test_complete_and_reopen(self, db_session: AsyncSession):
        """Completing stamps completion_date, reopening clears it."""
        service = TaskService(db_session)
        task = await service.create(TaskCreate(title="Color"))

        task = await service.update(task.id, TaskUpdate(completed=True))
        assert task.completed is True
        assert task.completion_date is not None

        task = await service.update(task.id, TaskUpdate(completed=False))
        assert task.completed is False
        assert task.completion_date is None

    async def test_partial_update_keeps_other_fields(self, db_session: AsyncSession):
        service = TaskService(db_session)
        task = await service.create(TaskCreate(title="Legendas", description="PT e EN", priority="high"))

        task = await service.update(task.id, TaskUpdate(title="Legendas finais"))
        assert task.title == "Legendas finais"
        assert task.description == "PT e EN"
        assert task.priority == "high"

    async def test_blank_title_rejected(self, db_session: AsyncSession):
        service = TaskService(db_session)
        task = await service.create(TaskCreate(title="Trilha"))
        with pytest.raises(ValidationError):
            await service.update(task.id, TaskUpdate(title="  "))


class TestTaskEndpoints:
    async def test_patch_completed(self, client: AsyncClient):
        task = (await client.post("/api/v1/tasks", json={"title": "Roteiro"})).json()["data"]

        response = await client.patch(f"/api/v1/tasks/{task['id']}", json={"completed": True})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Task updated"
        assert body["data"]["completed"] is True
        assert body["data"]["completion_date"] is not None

        response = await client.get(f"/api/v1/tasks/{task['id']}")
        assert response.json()["data"]["completed"] is True

    async def test_patch_missing_task(self, client: AsyncClient):
        response = await client.patch("/api/v1/tasks/404", json={"completed": True})
        assert response.status_code == 404
        assert response.json()["message"] == "Task with id=404 not found"

    async def test_list_by_project(self, client: AsyncClient):
        acme = (await client.post("/api/v1/clients", json={"name": "Acme"})).json()["data"]
        project = (
            await client.post("/api/v1/projects", json={"name": "Verão", "client_id": acme["id"]})
        ).json()["data"]
        await client.post("/api/v1/tasks", json={"title": "Diária", "project_id": project["id"]})
        await client.post("/api/v1/tasks", json={"title": "Avulsa"})

        response = await client.get("/api/v1/tasks", params={"project_id": project["id"]})
        assert [t["title"] for t in response.json()["data"]] == ["Diária"]

        response = await client.get("/api/v1/tasks")
        assert len(response.json()["data"]) == 2
