"""
FastAPI application for the code execution service.

This module configures logging and CORS, builds the execution engine from
the environment and exposes it over two routes:

* ``POST /api/execute`` compiles (if needed) and runs a snippet.
* ``GET /api/health`` reports liveness and the supported languages.

The routes are thin: request validation and status mapping live here,
everything else is delegated to :class:`~compilex.executor.CodeExecutor`.
"""

from __future__ import annotations

import logging
import math
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from anyio import to_thread
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import Config
from ..executor import CodeExecutor
from ..languages import supported_languages
from ..models import ExecuteRequest, ExecuteResponse, HealthResponse
from ..workspace import WorkspaceManager


logger = logging.getLogger("compilex")

if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[compilex] %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


config = Config.from_env()

logger.setLevel(config.log_level)

logger.info(
    "Loaded config: workspace_root=%s, cors_origins=%s, max_concurrent=%s, port=%s",
    config.workspace_root,
    config.cors_origins,
    config.max_concurrent_executions or "unbounded",
    config.port,
)

executor = CodeExecutor(WorkspaceManager(config.workspace_root))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Size the worker thread pool that synchronous routes run on.

    Every execution occupies one worker thread for its whole duration, so
    the pool size is the concurrency limit.  It is lifted entirely unless
    ``COMPILEX_MAX_CONCURRENT_EXECUTIONS`` asks for a bound.
    """
    limiter = to_thread.current_default_thread_limiter()
    limiter.total_tokens = config.max_concurrent_executions or math.inf
    logger.info("Worker thread limit: %s", limiter.total_tokens)
    yield


app = FastAPI(title="Compilex", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request and the status it was answered with."""
    path = request.url.path
    method = request.method
    client = getattr(request.client, "host", "unknown")

    logger.info("Incoming request: %s %s from %s", method, path, client)
    response = await call_next(request)
    logger.info("Response: %s %s -> %s", method, path, response.status_code)
    return response


def _error_response(status_code: int, body: ExecuteResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(RequestValidationError)
async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return _error_response(400, ExecuteResponse(error="Invalid JSON request"))


@app.get("/api/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Return liveness, the supported languages and the current time."""
    return HealthResponse(
        status="healthy",
        languages=supported_languages(executor.languages),
        timestamp=datetime.now(timezone.utc),
    )


@app.post("/api/execute", response_model=ExecuteResponse, response_model_exclude_none=True)
def execute(req: ExecuteRequest):
    """Compile and run ``req.code``.

    Engine failures (unsupported language, setup, compilation, run or
    timeout) are answered with 422 and the error message; compiler
    diagnostics and program output are included whenever they were
    captured.
    """
    if not req.language or not req.code:
        return _error_response(400, ExecuteResponse(error="Language and code are required"))

    try:
        result = executor.execute(req.language, req.code)
    except Exception as exc:
        logger.exception("[/api/execute] Unhandled error during execution: %s", exc)
        return _error_response(500, ExecuteResponse(error="Execution error"))

    if result.error is not None:
        return _error_response(
            422, ExecuteResponse(output=result.output or None, error=str(result.error))
        )
    return ExecuteResponse(output=result.output)


def run() -> None:
    """Serve the API with Uvicorn on ``config.host``:``config.port``."""
    import uvicorn

    logger.info("Compilex backend starting on port %s", config.port)
    logger.info("Health check: http://localhost:%s/api/health", config.port)
    logger.info("Supported languages: %s", ", ".join(supported_languages(executor.languages)))
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
