"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (NGSS__SECTION__KEY)
3. YAML config file (--config path, or ~/.config/ngss-mcp/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    NGSS__<SECTION>__<KEY>=<VALUE>

Examples:
    NGSS__LOGGING__LEVEL=DEBUG
    NGSS__CACHE__TTL_SEC=60
    NGSS__DATA__CORPUS_PATH=/srv/ngss/ngss-ms-standards.json
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ngss_mcp.config.constants import LIMIT_MAX, LIMIT_MIN, PORT_MAX, PORT_MIN, UNIT_SIZE_MAX, UNIT_SIZE_MIN

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        NGSS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every cache hit and miss.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ServerConfig(BaseModel):
    """MCP server configuration.

    Env vars:
        NGSS__SERVER__TRANSPORT: stdio (default) or http
        NGSS__SERVER__HOST: Bind address for http transport
        NGSS__SERVER__PORT: Port for http transport
    """

    transport: Literal["stdio", "http"] = Field(
        default="stdio",
        description="MCP transport. stdio for desktop clients, http for networked callers.",
    )
    host: str = Field(
        default="127.0.0.1",
        description="Bind address for http transport.",
    )
    port: int = Field(
        default=7655,
        description="Port for http transport.",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (PORT_MIN <= v <= PORT_MAX):
            raise ValueError(f"Port must be {PORT_MIN}-{PORT_MAX}, got {v}")
        return v


class CacheConfig(BaseModel):
    """Query cache configuration.

    Env vars:
        NGSS__CACHE__ENABLED: Disable to recompute every query
        NGSS__CACHE__MAX_ENTRIES: Capacity per cached operation
        NGSS__CACHE__TTL_SEC: Entry time-to-live
    """

    enabled: bool = Field(
        default=True,
        description="Cache fuzzy-match and search results.",
    )
    max_entries: int = Field(
        default=100,
        ge=1,
        description="Max entries per cache. Oldest-inserted entry is evicted at capacity.",
    )
    ttl_sec: float = Field(
        default=300.0,
        gt=0,
        description="Entry time-to-live (5 min default). Checked lazily on read.",
    )


class LimitsConfig(BaseModel):
    """Pagination and result-count defaults.

    These are DEFAULT values - tools allow per-request overrides up to the
    hard maximums in constants.py.

    Env vars:
        NGSS__LIMITS__DEFAULT_LIMIT: Default page size
        NGSS__LIMITS__DEFAULT_UNIT_SIZE: Default unit size for suggestions
        NGSS__LIMITS__FUZZY_DEFAULT_LIMIT: Default number of fuzzy matches returned
    """

    default_limit: int = Field(
        default=10,
        ge=LIMIT_MIN,
        le=LIMIT_MAX,
        description="Default page size for search tools.",
    )
    default_unit_size: int = Field(
        default=3,
        ge=UNIT_SIZE_MIN,
        le=UNIT_SIZE_MAX,
        description="Default unit size (anchor included) for unit suggestions.",
    )
    fuzzy_default_limit: int = Field(
        default=5,
        ge=LIMIT_MIN,
        le=LIMIT_MAX,
        description="Default number of driving-question matches returned.",
    )


class DataConfig(BaseModel):
    """Corpus location.

    Env vars:
        NGSS__DATA__CORPUS_PATH: Path to the standards JSON file
    """

    corpus_path: str | None = Field(
        default=None,
        description="Standards corpus JSON. Default: the corpus bundled with the package.",
    )


class NgssConfig(BaseModel):
    """Root configuration for the NGSS MCP server.

    All settings can be configured via:
    1. Environment variables: NGSS__SECTION__KEY
    2. A YAML config file
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    data: DataConfig = Field(default_factory=DataConfig)
