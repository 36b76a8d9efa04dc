import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lexiassist.config import Settings
from lexiassist.errors import AppError
from lexiassist.routers import auth, cases, clients, hearings
from lexiassist.services.llm import AIClient
from lexiassist.storage.database import Database
from lexiassist.storage.files import FileStore

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await app.state.db.connect()
    logger.info("ready")
    yield
    await app.state.ai.close()
    await app.state.db.close()


def _register_error_handlers(app: FastAPI):
    @app.exception_handler(AppError)
    async def app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "message": "Validation failed",
                "error": jsonable_encoder(exc.errors()),
                "code": "validation_error",
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail, "error": None},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("unhandled error in %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"message": "Server error", "error": str(exc), "code": "server_error"},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = FastAPI(
        title="LexiAssist",
        description="case, client and hearing management for lawyers",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = Database(settings.database_url)
    app.state.ai = AIClient(settings)
    app.state.files = FileStore(settings.upload_dir)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(cases.router, prefix="/api/cases", tags=["cases"])
    app.include_router(clients.router, prefix="/api/clients", tags=["clients"])
    app.include_router(hearings.router, prefix="/api/hearings", tags=["hearings"])

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "ai_configured": settings.ai_configured}

    return app


def run():
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "lexiassist.main:create_app", factory=True, host=settings.host, port=settings.port,
    )
