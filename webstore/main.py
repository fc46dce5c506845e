import json
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from webstore.api.http import health_router, search_router, storage_router
from webstore.core.auth import AuthProvider, build_auth_provider
from webstore.core.config import Settings
from webstore.core.db import create_engine, create_session_factory, init_models
from webstore.core.logging import get_logger
from webstore.db.repositories import ObjectRepository
from webstore.domains.storage.rendering import DocumentRenderer
from webstore.domains.storage.services import StorageGateway

logger = get_logger(__name__)


class EscapedJSONResponse(JSONResponse):
    """JSON с \\u-экранированием не-ASCII символов.

    Ошибки валидации повторяют входные данные, а в них могут быть
    одиночные суррогаты, которые не кодируются в UTF-8.
    """

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=True, separators=(",", ":")).encode("ascii")


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return EscapedJSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors())}
    )


def create_app(
    settings: Optional[Settings] = None,
    auth_provider: Optional[AuthProvider] = None,
    renderer: Optional[DocumentRenderer] = None
) -> FastAPI:
    """Сборка приложения; настройки передаются явно и дальше не меняются"""
    settings = settings or Settings()
    engine = create_engine(settings)
    store = ObjectRepository(create_session_factory(engine))
    gateway = StorageGateway(
        store,
        settings,
        auth_provider or build_auth_provider(settings),
        renderer=renderer,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings.storage_root.mkdir(parents=True, exist_ok=True)
        await init_models(engine)
        logger.info("storage_ready", storage_root=str(settings.storage_root))
        yield
        await engine.dispose()

    app = FastAPI(
        title="webstore",
        description="Versioned file storage for web clients",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.state.settings = settings
    app.state.gateway = gateway

    # Подключаем роутеры
    app.include_router(health_router)
    app.include_router(search_router)
    app.include_router(storage_router, prefix=settings.url_prefix.rstrip("/"))

    return app


app = create_app()
