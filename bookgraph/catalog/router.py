"""
GraphQL router for the catalog.

One ``GraphQLRouter`` serves both transports on the same path:

- ``POST``/``GET`` : queries and mutations over HTTP (JSON in, JSON out)
- websocket        : the ``bookAdded`` subscription, over either the
                     ``graphql-transport-ws`` or legacy ``graphql-ws``
                     subprotocol

The router is also where the schema declaration file is read and
checked against the executable strawberry schema at startup.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List, Union

from graphql import GraphQLError, GraphQLSchema, build_schema
from graphql.utilities import find_breaking_changes
from strawberry.fastapi import GraphQLRouter
from strawberry.subscriptions import GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL

from ..events import BookEventBus
from ..storage import LibraryStore
from .schemas import schema

if TYPE_CHECKING:
    from ..settings import Settings

logger = logging.getLogger(__name__)


class SchemaDeclarationError(RuntimeError):
    """The schema declaration file is unusable or disagrees with the code."""


def load_schema_declaration(path: Union[str, Path]) -> GraphQLSchema:
    """Read and parse the SDL declaration at ``path``.

    Parameters
    ----------
    path : str or Path
        Location of the ``.graphql`` declaration.

    Returns
    -------
    GraphQLSchema
        The declared schema (no resolvers attached).

    Raises
    ------
    SchemaDeclarationError
        If the file cannot be read or is not valid SDL.
    """
    path = Path(path)
    try:
        sdl = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaDeclarationError(f"Cannot read schema declaration {path}: {e}") from e
    try:
        declared = build_schema(sdl)
    except (GraphQLError, TypeError) as e:
        raise SchemaDeclarationError(f"Invalid schema declaration {path}: {e}") from e
    logger.info("Schema loaded successfully from %s", path)
    return declared


def schema_differences(declared: GraphQLSchema) -> List[str]:
    """Describe what the executable schema breaks relative to ``declared``."""
    implemented = build_schema(schema.as_str())
    return [change.description for change in find_breaking_changes(declared, implemented)]


def check_schema(declared: GraphQLSchema) -> None:
    """Raise ``SchemaDeclarationError`` unless the code implements ``declared``."""
    differences = schema_differences(declared)
    if differences:
        raise SchemaDeclarationError(
            "Schema declaration does not match resolvers: " + "; ".join(differences)
        )
    logger.info("Schema and resolvers set up successfully.")


def create_graphql_router(
    store: LibraryStore,
    bus: BookEventBus,
    settings: "Settings",
) -> GraphQLRouter:
    """Build the GraphQL router bound to ``store`` and ``bus``.

    Parameters
    ----------
    store : LibraryStore
        Store exposed to every resolver through the context.
    bus : BookEventBus
        Bus used by ``createBook`` and the ``bookAdded`` subscription.
    settings : Settings
        Only ``graphql_ide`` is read here; the mount path is applied by
        the caller with ``include_router(prefix=...)``.
    """

    async def get_context() -> dict:
        return {"store": store, "bus": bus}

    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide=settings.graphql_ide,
        subscription_protocols=(GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL),
    )
