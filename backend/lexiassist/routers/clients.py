from fastapi import APIRouter, Depends

from lexiassist.deps import get_current_user_id, get_db
from lexiassist.errors import NotFoundError
from lexiassist.models.client import Client, ClientCreate, ClientResponse, ClientUpdate
from lexiassist.services.references import with_case_list
from lexiassist.storage.database import Database

router = APIRouter()


@router.get("")
async def list_clients(
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> list[Client]:
    return [Client.model_validate(r) for r in await db.clients.list(user_id)]


@router.get("/{client_id}")
async def get_client(
    client_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> ClientResponse:
    row = await db.clients.get(user_id, client_id)
    if not row:
        raise NotFoundError("Client")
    return await with_case_list(db, user_id, Client.model_validate(row))


@router.post("", status_code=201)
async def create_client(
    body: ClientCreate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> Client:
    client = Client(**body.model_dump(), lawyer_id=user_id)
    row = await db.clients.insert(client.model_dump())
    return Client.model_validate(row)


@router.put("/{client_id}")
async def update_client(
    client_id: str,
    body: ClientUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> Client:
    row = await db.clients.update(user_id, client_id, body.changes())
    if not row:
        raise NotFoundError("Client")
    return Client.model_validate(row)


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    if not await db.clients.delete(user_id, client_id):
        raise NotFoundError("Client")
    return {"message": "Client deleted"}
