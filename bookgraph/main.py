# bookgraph/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from .catalog import check_schema, create_graphql_router, load_schema_declaration
from .events import BookEventBus
from .settings import Settings
from .storage import LibraryStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[LibraryStore] = None,
    bus: Optional[BookEventBus] = None,
) -> FastAPI:
    """Build the application: HTTP + websocket GraphQL on one path.

    Raises ``SchemaDeclarationError`` when the declaration file cannot be
    read or does not match the resolvers.
    """
    settings = settings or Settings.from_env()
    store = store if store is not None else LibraryStore()
    bus = bus if bus is not None else BookEventBus()

    check_schema(load_schema_declaration(settings.schema_path))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("GraphQL service starting on %s", settings.url)
        yield
        # Ends every open subscription so websocket handlers return.
        logger.info("GraphQL service shutting down...")
        bus.close()

    app = FastAPI(
        title="Bookgraph",
        description="GraphQL API over an in-memory catalogue of books and authors.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.bus = bus

    @app.get("/")
    def health_check():
        return {"status": "ok", "graphql": settings.graphql_path}

    @app.get("/health")
    def health():
        return {
            "status": "healthy",
            "books": len(store.books),
            "authors": len(store.authors),
        }

    app.include_router(
        create_graphql_router(store, bus, settings),
        prefix=settings.graphql_path,
    )
    logger.info("GraphQL router mounted at %s", settings.graphql_path)
    return app


class BookgraphServer(uvicorn.Server):
    """uvicorn server that announces the GraphQL URL once it is listening."""

    def __init__(self, config: uvicorn.Config, url: str):
        super().__init__(config)
        self.url = url

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        # Not reached when binding fails: uvicorn exits from startup().
        if self.started:
            logger.info("Server is running on %s", self.url)


def run() -> None:
    """Console entry point. Startup errors are logged, not re-raised."""
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logger.info("Starting server...")

    try:
        app = create_app(settings)
    except Exception:
        logger.exception("Error setting up the server")
        return

    try:
        config = uvicorn.Config(
            app, host=settings.host, port=settings.port, log_level=settings.log_level.lower()
        )
        BookgraphServer(config, settings.url).run()
    except (OSError, SystemExit) as e:
        # uvicorn exits instead of raising when the port cannot be bound.
        logger.error("Server failed to start on %s:%s (%s)", settings.host, settings.port, e)
    except Exception:
        logger.exception("Error during server start")


if __name__ == "__main__":
    run()
