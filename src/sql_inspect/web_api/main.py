"""
Review API
==========
FastAPI application serving the review engine.

Run with:
    uvicorn sql_inspect.web_api.main:app
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sql_inspect import __version__
from sql_inspect.web_api.config import Settings, settings
from sql_inspect.web_api.routers import health, inspect

API_NAME = "SQL Inspect API"


def create_app(cfg: Settings = settings) -> FastAPI:
    """Build the application for *cfg*; docs are served only in debug mode."""
    application = FastAPI(
        title=API_NAME,
        description="Rule-based review of MySQL/TiDB change requests",
        version=__version__,
        docs_url="/docs" if cfg.DEBUG else None,
        redoc_url="/redoc" if cfg.DEBUG else None,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    application.include_router(health.router, tags=["Health"])
    application.include_router(inspect.router, prefix="/inspect", tags=["Inspect"])

    @application.get("/")
    async def root():
        return {
            "name": API_NAME,
            "version": __version__,
            "docs": "/docs" if cfg.DEBUG else "disabled",
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
