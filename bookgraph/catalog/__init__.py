"""
Catalog package for the book GraphQL API.

This package holds the GraphQL side of the service: the strawberry
types and root operations (``schemas``), the data access functions
they call (``resolvers``), and the router that serves them over HTTP
and websockets (``router``). The SDL declaration of the public surface
ships next to them as ``schema.graphql`` and is checked against the
code when the application is built.
"""

from .router import (  # noqa: F401
    SchemaDeclarationError,
    check_schema,
    create_graphql_router,
    load_schema_declaration,
)
from .schemas import schema  # noqa: F401
