from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError
from src.modules.clients.models import Client
from src.modules.clients.schemas import ClientCreate


class ClientService:
    """Service for client operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, client_id: int) -> Client | None:
        result = await self.db.execute(select(Client).where(Client.id == client_id))
        return result.scalar_one_or_none()

    async def get_or_404(self, client_id: int) -> Client:
        client = await self.get_by_id(client_id)
        if not client:
            raise NotFoundError("Client", client_id)
        return client

    async def list_clients(self, active: bool | None = None) -> list[Client]:
        stmt = select(Client)
        if active is not None:
            stmt = stmt.where(Client.active == active)
        result = await self.db.execute(stmt.order_by(Client.name, Client.id))
        return list(result.scalars().all())

    async def create(self, data: ClientCreate) -> Client:
        client = Client(
            name=data.name,
            short_name=data.short_name,
            contact_email=data.contact_email,
            notes=data.notes,
            active=True,
        )
        self.db.add(client)
        await self.db.flush()
        await self.db.refresh(client)
        return client
