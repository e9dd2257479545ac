from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.modules.clients.schemas import ClientCreate, ClientResponse
from src.modules.clients.service import ClientService
from src.shared.schemas import ApiResponse

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.get("", response_model=ApiResponse[list[ClientResponse]])
async def list_clients(
    active: bool | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """List clients ordered by name."""
    clients = await ClientService(db).list_clients(active)
    return ApiResponse(success=True, data=[ClientResponse.model_validate(c) for c in clients])


@router.get("/{client_id}", response_model=ApiResponse[ClientResponse])
async def get_client(client_id: int, db: AsyncSession = Depends(get_db)):
    client = await ClientService(db).get_or_404(client_id)
    return ApiResponse(data=ClientResponse.model_validate(client))


@router.post("", response_model=ApiResponse[ClientResponse], status_code=201)
async def create_client(data: ClientCreate, db: AsyncSession = Depends(get_db)):
    client = await ClientService(db).create(data)
    return ApiResponse(data=ClientResponse.model_validate(client), message="Client created")
