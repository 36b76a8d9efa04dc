from fastapi import APIRouter, Depends

from lexiassist.config import Settings
from lexiassist.deps import get_current_user_id, get_db, get_settings
from lexiassist.errors import NotFoundError
from lexiassist.models.base import utcnow
from lexiassist.models.hearing import Hearing, HearingCreate, HearingResponse, HearingUpdate
from lexiassist.services.references import with_cases
from lexiassist.storage.database import Database

router = APIRouter()


@router.get("")
async def list_hearings(
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> list[HearingResponse]:
    hearings = [Hearing.model_validate(r) for r in await db.hearings.list(user_id)]
    return await with_cases(db, user_id, hearings)


# declared before /{hearing_id} so "upcoming" is not taken for an id
@router.get("/upcoming")
async def upcoming_hearings(
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> list[HearingResponse]:
    rows = await db.hearings.upcoming(user_id, utcnow(), settings.upcoming_hearings_limit)
    return await with_cases(db, user_id, [Hearing.model_validate(r) for r in rows])


@router.get("/{hearing_id}")
async def get_hearing(
    hearing_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> HearingResponse:
    row = await db.hearings.get(user_id, hearing_id)
    if not row:
        raise NotFoundError("Hearing")
    [resp] = await with_cases(db, user_id, [Hearing.model_validate(row)])
    return resp


@router.post("", status_code=201)
async def create_hearing(
    body: HearingCreate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> Hearing:
    hearing = Hearing(**body.model_dump(), lawyer_id=user_id)
    row = await db.hearings.insert(hearing.model_dump())
    return Hearing.model_validate(row)


@router.put("/{hearing_id}")
async def update_hearing(
    hearing_id: str,
    body: HearingUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> Hearing:
    row = await db.hearings.update(user_id, hearing_id, body.changes())
    if not row:
        raise NotFoundError("Hearing")
    return Hearing.model_validate(row)


@router.delete("/{hearing_id}")
async def delete_hearing(
    hearing_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> dict:
    if not await db.hearings.delete(user_id, hearing_id):
        raise NotFoundError("Hearing")
    return {"message": "Hearing deleted"}
