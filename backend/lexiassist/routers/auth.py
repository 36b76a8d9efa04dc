import logging

from fastapi import APIRouter, Depends, HTTPException, status

from lexiassist.config import Settings
from lexiassist.deps import get_current_user_id, get_db, get_settings
from lexiassist.models.user import TokenResponse, User, UserLogin, UserRecord, UserRegister
from lexiassist.services.auth import create_access_token, hash_password, verify_password
from lexiassist.storage.database import Database

logger = logging.getLogger(__name__)

router = APIRouter()


def _public(record: UserRecord) -> User:
    return User.model_validate(record.model_dump(exclude={"password_hash"}))


@router.post("/register", status_code=201)
async def register(
    body: UserRegister,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    if await db.users.get_by_email(body.email):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "User already exists")

    record = UserRecord(
        name=body.name,
        email=body.email,
        bar_council_id=body.bar_council_id,
        password_hash=hash_password(body.password),
    )
    await db.users.insert(record.model_dump())
    logger.info("registered user %s", record.id)
    return TokenResponse(token=create_access_token(settings, record.id), user=_public(record))


@router.post("/login")
async def login(
    body: UserLogin,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    row = await db.users.get_by_email(body.email)
    if not row or not verify_password(body.password, row["password_hash"]):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid credentials")

    record = UserRecord.model_validate(row)
    return TokenResponse(token=create_access_token(settings, record.id), user=_public(record))


@router.get("/me")
async def me(
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_db),
) -> User:
    row = await db.users.get(user_id)
    if not row:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Token is not valid")
    return _public(UserRecord.model_validate(row))
