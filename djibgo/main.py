from contextlib import asynccontextmanager

from fastapi import FastAPI

from djibgo import __version__
from djibgo.core.config import Settings, get_settings
from djibgo.core.logging_config import configure_logging
from djibgo.infrastructure.database.session import dispose_engine, init_db
from djibgo.interfaces.http.cors import PreflightCORSMiddleware
from djibgo.interfaces.http.errors import register_exception_handlers
from djibgo.interfaces.http.routers import create_api_router


def create_app(settings: Settings | None = None) -> FastAPI:
    explicit_settings = settings is not None
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.database.create_tables:
            await init_db(settings)
        yield
        await dispose_engine()

    app = FastAPI(
        title=settings.project_name,
        description="Temporary password issuance over WhatsApp for DjibGo accounts",
        version=__version__,
        lifespan=lifespan,
    )

    if explicit_settings:
        app.dependency_overrides[get_settings] = lambda: settings

    app.state.cors_allow_origins = list(settings.cors.allow_origins)
    app.add_middleware(
        PreflightCORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=settings.cors.allow_headers,
    )

    register_exception_handlers(app)
    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", include_in_schema=False)
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "djibgo.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
    )


app = create_app()
