from fastapi import FastAPI

from docsync.api.routers import create_chunks_router, create_sites_router, create_systems_router
from docsync.container import Container


def create_app(container: Container) -> FastAPI:
    """Build the FastAPI application from a configured container."""
    app = FastAPI(title="DocSync", version="0.1.0")
    app.include_router(create_systems_router(container.config()))
    app.include_router(
        create_sites_router(
            container.config_service(),
            container.reconciliation_service(),
            container.runs_repository(),
            container.run_registry(),
        )
    )
    app.include_router(create_chunks_router(container.chunker()))

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
