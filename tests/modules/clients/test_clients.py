import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError
from src.modules.clients.schemas import ClientCreate
from src.modules.clients.service import ClientService


class TestClientService:
    """Tests for ClientService."""

    async def test_create_client(self, db_session: AsyncSession):
        service = ClientService(db_session)

        client = await service.create(ClientCreate(name="  Acme Bebidas ", short_name="ACME"))

        assert client.id is not None
        assert client.name == "Acme Bebidas"
        assert client.short_name == "ACME"
        assert client.active is True

    async def test_list_clients_filters_active(self, db_session: AsyncSession):
        service = ClientService(db_session)
        await service.create(ClientCreate(name="Orion Seguros"))
        inactive = await service.create(ClientCreate(name="Casa Nobre"))
        inactive.active = False
        await db_session.flush()

        names = [c.name for c in await service.list_clients()]
        assert names == ["Casa Nobre", "Orion Seguros"]

        active = await service.list_clients(active=True)
        assert [c.name for c in active] == ["Orion Seguros"]

    async def test_get_or_404(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await ClientService(db_session).get_or_404(42)


class TestClientEndpoints:
    async def test_create_and_list(self, client: AsyncClient):
        response = await client.post("/api/v1/clients", json={"name": "Acme Bebidas"})
        assert response.status_code == 201
        created = response.json()["data"]
        assert created["name"] == "Acme Bebidas"

        response = await client.get("/api/v1/clients")
        assert response.status_code == 200
        assert [c["id"] for c in response.json()["data"]] == [created["id"]]

        response = await client.get(f"/api/v1/clients/{created['id']}")
        assert response.json()["data"]["name"] == "Acme Bebidas"

    async def test_blank_name_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/clients", json={"name": "   "})
        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["errors"][0]["field"] == "name"

    async def test_get_missing_client(self, client: AsyncClient):
        response = await client.get("/api/v1/clients/99")
        assert response.status_code == 404
        assert response.json()["message"] == "Client with id=99 not found"
