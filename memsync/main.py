from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import os
import time
from typing import Optional
from starlette.concurrency import run_in_threadpool
from memsync.config import settings
from memsync.logging import logger
from memsync.models import SyncErrorKind, SyncResult
from memsync.sync_service import ObservationIndexer, ObservationStore, SyncService

_STATUS_BY_ERROR = {
    SyncErrorKind.INVALID_INPUT.value: 400,
    SyncErrorKind.LOOKUP_FAILURE.value: 500,
    SyncErrorKind.TRANSFORM_FAILURE.value: 500,
    SyncErrorKind.DELEGATION_FAILURE.value: 500,
    SyncErrorKind.SERVICE_UNAVAILABLE.value: 500,
}

def create_app(store: Optional[ObservationStore] = None, indexer: Optional[ObservationIndexer] = None) -> FastAPI:
    """Build the API around the given collaborators.

    Anything not injected is created from settings on startup.
    """
    app = FastAPI(
        title="memsync - Observation Sync",
        description="On-demand synchronization of stored observations into the Chroma search index",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.sync_service = SyncService(store, indexer) if store is not None and indexer is not None else None

    @app.on_event("startup")
    async def startup_event():
        """Initialize collaborators on startup."""
        # Disable ChromaDB telemetry to reduce log noise
        os.environ["ANONYMIZED_TELEMETRY"] = "False"

        if app.state.sync_service is None:
            from memsync.chroma_sync import ChromaSync
            from memsync.session_store import SessionStore

            settings.validate()
            app.state.sync_service = SyncService(
                store if store is not None else SessionStore(settings.SQLITE_DB_PATH),
                indexer if indexer is not None else ChromaSync(),
            )
            logger.info(f"Using session store {settings.SQLITE_DB_PATH} and collection '{settings.CHROMADB_COLLECTION}'")

        logger.info("🚀 memsync starting up - observation sync enabled")

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time to response headers."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        return response

    @app.get("/health")
    async def health():
        """Basic health check endpoint."""
        return {"status": "healthy", "timestamp": time.time()}

    @app.post("/api/sync/observations")
    async def sync_observations(request: Request):
        """Sync specific observations to Chroma.

        Body: ``{"ids": [1, 2, 3]}``
        """
        try:
            payload = await request.json()
        except ValueError:
            payload = None
        ids = payload.get("ids") if isinstance(payload, dict) else None
        service = getattr(app.state, "sync_service", None)
        if service is None:
            logger.error("Sync requested before the sync service was initialized")
            result = SyncResult(
                success=False,
                error_message="Sync failed: sync service is not initialized",
                error_kind=SyncErrorKind.SERVICE_UNAVAILABLE,
            )
        else:
            # Store and indexer calls block; keep them off the event loop
            result = await run_in_threadpool(service.sync_observations, ids)
        status_code = 200 if result.success else _STATUS_BY_ERROR.get(result.error_kind, 500)
        return JSONResponse(status_code=status_code, content=result.to_response())

    return app

app = create_app()
