import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from livebracket.config import StoreBackend, config, environment
from livebracket.database import database
from livebracket.manager import TournamentManager
from livebracket.notifications.display import BroadcastDisplayChannel
from livebracket.notifications.events import LoggingEventSink
from livebracket.routes import backups, overlay, tournaments
from livebracket.stores import DocumentStore
from livebracket.stores.json_file import JsonFileDocumentStore
from livebracket.stores.memory import InMemoryDocumentStore
from livebracket.stores.sql import SqlDocumentStore
from livebracket.utils.alembic import alembic_run_migrations
from livebracket.utils.logging import logger
from livebracket.utils.timers import AsyncioScheduler, run_periodically


def create_document_store() -> DocumentStore:
    match config.store_backend:
        case StoreBackend.MEMORY:
            return InMemoryDocumentStore()
        case StoreBackend.JSON:
            return JsonFileDocumentStore(config.json_store_path)
        case StoreBackend.SQL:
            return SqlDocumentStore(database)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(f"Starting livebracket in {environment} with {config.store_backend} store")
    if config.store_backend == StoreBackend.SQL:
        await database.connect()
        if config.run_migrations_on_startup:
            alembic_run_migrations()

    scheduler = AsyncioScheduler()
    display = BroadcastDisplayChannel()
    manager = TournamentManager(create_document_store(), LoggingEventSink(), display, scheduler)
    app.state.display_channel = display
    app.state.tournament_manager = manager

    async def cleanup() -> None:
        await manager.cleanup_old_backups()

    cleanup_task = asyncio.create_task(
        run_periodically(config.cleanup_interval_seconds, "cleanup", cleanup)
    )
    try:
        yield
    finally:
        cleanup_task.cancel()
        scheduler.cancel_all()
        if config.store_backend == StoreBackend.SQL:
            await database.disconnect()


def create_app() -> FastAPI:
    app = FastAPI(title="Livebracket API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    for router in (tournaments.router, backups.router, overlay.router):
        app.include_router(router)
    return app


app = create_app()
