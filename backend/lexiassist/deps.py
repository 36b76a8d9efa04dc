import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from lexiassist.config import Settings
from lexiassist.services.auth import authenticate
from lexiassist.services.llm import AIClient
from lexiassist.storage.database import Database
from lexiassist.storage.files import FileStore

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_ai(request: Request) -> AIClient:
    return request.app.state.ai


def get_files(request: Request) -> FileStore:
    return request.app.state.files


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    settings: Settings = Depends(get_settings),
) -> str:
    if credentials is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")
    user_id = authenticate(settings, credentials.credentials)
    if not user_id:
        logger.warning("rejected bearer token")
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Token is not valid")
    return user_id
