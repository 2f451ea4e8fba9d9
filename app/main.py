from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api_routers.v1 import api_router
from app.features.health.routes.health import router as health_router
from app.platform.config import get_settings, missing_credentials
from app.platform.exceptions import add_exception_handlers
from app.platform.logger import get_logger

logger = get_logger("app")

# Tools offered by the suite. Only the site tools run on this server; the
# video tools transcode in the browser with a bundled WASM engine.
TOOLS = [
    {"name": "Site Inspector", "path": "/api/v1/inspect", "runs_on": "server"},
    {"name": "PageSpeed Audit", "path": "/api/v1/audit", "runs_on": "server"},
    {"name": "Video Converter", "path": None, "runs_on": "browser"},
    {"name": "Video Trimmer", "path": None, "runs_on": "browser"},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    for name in missing_credentials(get_settings()):
        logger.warning(f"{name} is not set, endpoints that need it will answer with a configuration error")
    yield


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Website inspection and PageSpeed audit API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_exception_handlers(app)

    # Root endpoint for basic info
    @app.get("/", tags=["Info"])
    def root():
        return {
            "app_name": settings.APP_NAME,
            "description": "Browser utility tools: site inspection, PageSpeed audits, video conversion and trimming.",
            "version": "1.0.0",
            "docs_url": "/docs",
            "api_base": "/api/v1",
            "tools": TOOLS,
        }

    app.include_router(health_router)
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
