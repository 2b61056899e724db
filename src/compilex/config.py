"""Configuration loader.

The service reads its configuration from environment variables so the same
image can run in different contexts.  Reasonable defaults are provided so
that local development works out of the box.

Environment variables:

``COMPILEX_WORKSPACE_ROOT``
    Parent directory for per-execution workspaces.  Defaults to
    ``compilex`` inside the system temporary directory.  Workspaces are
    always removed once their execution finishes.

``COMPILEX_CORS_ORIGINS``
    Comma-separated list of origins allowed to call the API from a browser.
    Defaults to the local development frontend on port 3000.

``COMPILEX_LOG_LEVEL``
    Level for the ``compilex`` logger.  Defaults to ``INFO``.

``COMPILEX_MAX_CONCURRENT_EXECUTIONS``
    Upper bound on executions running at once.  Executions run on the API
    server's worker threads, so this sizes that pool.  ``0`` (the default)
    removes the bound entirely.

``HOST``
    Address the API server binds to.  Defaults to ``0.0.0.0``.

``PORT``
    The port on which the API server listens.  Defaults to 8080.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from typing import List

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def _int_var(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {val}")


@dataclass
class Config:
    """Centralised configuration object."""

    workspace_root: str
    cors_origins: List[str]
    log_level: str
    max_concurrent_executions: int
    host: str
    port: int

    @classmethod
    def load(cls) -> "Config":
        workspace_root = os.getenv(
            "COMPILEX_WORKSPACE_ROOT", os.path.join(tempfile.gettempdir(), "compilex")
        )

        cors_env = os.getenv("COMPILEX_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
        cors_origins = [origin.strip() for origin in cors_env.split(",") if origin.strip()]

        log_level = os.getenv("COMPILEX_LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"Invalid COMPILEX_LOG_LEVEL: {log_level}")

        max_concurrent_executions = _int_var("COMPILEX_MAX_CONCURRENT_EXECUTIONS", 0)
        if max_concurrent_executions < 0:
            raise ValueError(
                f"Invalid COMPILEX_MAX_CONCURRENT_EXECUTIONS: {max_concurrent_executions}"
            )

        return cls(
            workspace_root=workspace_root,
            cors_origins=cors_origins,
            log_level=log_level,
            max_concurrent_executions=max_concurrent_executions,
            host=os.getenv("HOST", "0.0.0.0"),
            port=_int_var("PORT", 8080),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """
        Alternate constructor used by the API to load configuration.

        This wrapper calls :meth:`load` to construct the configuration.
        It exists to provide a more intuitive name when consumed in
        application code.
        """
        return cls.load()
