import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

# Basic settings helper to read environment configuration.

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parent / "catalog" / "schema.graphql"

GRAPHQL_IDES = ("graphiql", "apollo-sandbox", "pathfinder")

# Names understood by both logging and uvicorn.
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _as_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, not an integer; using %d", name, raw, default)
        return default


def _as_ide(val: str | None) -> str | None:
    if val is None:
        return "graphiql"
    val = val.strip().lower()
    if val in ("", "none", "off", "false", "0"):
        return None
    if val not in GRAPHQL_IDES:
        logger.warning("Unknown GraphQL IDE %r; using graphiql", val)
        return "graphiql"
    return val


def _as_level(val: str | None) -> str:
    if val is None or val.strip() == "":
        return "INFO"
    level = val.strip().upper()
    if level not in LOG_LEVELS:
        logger.warning("Unknown log level %r; using INFO", val)
        return "INFO"
    return level


@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = 4000
    graphql_path: str = "/graphql"
    schema_path: Path = field(default_factory=lambda: DEFAULT_SCHEMA_PATH)
    graphql_ide: str | None = "graphiql"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from ``BOOKGRAPH_*`` environment variables."""
        return cls(
            host=os.getenv("BOOKGRAPH_HOST", "0.0.0.0"),
            port=_as_int("BOOKGRAPH_PORT", 4000),
            graphql_path=os.getenv("BOOKGRAPH_GRAPHQL_PATH", "/graphql"),
            schema_path=Path(os.getenv("BOOKGRAPH_SCHEMA_PATH") or DEFAULT_SCHEMA_PATH),
            graphql_ide=_as_ide(os.getenv("BOOKGRAPH_GRAPHQL_IDE")),
            log_level=_as_level(os.getenv("BOOKGRAPH_LOG_LEVEL")),
        )

    @property
    def url(self) -> str:
        host = "localhost" if self.host in ("0.0.0.0", "") else self.host
        return f"http://{host}:{self.port}{self.graphql_path}"

