"""FastAPI server for the chainkit assistant.

Run with:
    chainkit-server --reload
    # or: uvicorn chainkit.server:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import argparse
import logging
import time
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from chainkit import __version__
from chainkit.api.routes import router
from chainkit.api.sessions import SessionStore
from chainkit.assistant import create_assistant
from chainkit.chat_models import ChatOpenAI
from chainkit.config import CORS_ORIGINS, SERVER_HOST, SERVER_PORT
from chainkit.services.metrics import metrics

# ── Logging ──────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: initialise / tear-down shared resources ────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Start-up: one shared chat model, one executor per session.

    The chat model's HTTP client is closed and buffered metrics are flushed
    on shutdown.
    """
    llm = ChatOpenAI()
    application.state.sessions = SessionStore(lambda memory: create_assistant(memory=memory, llm=llm))
    logger.info("Assistant ready (model %s).", llm.model)
    yield
    await llm.aclose()
    metrics.flush()


# ── FastAPI application ──────────────────────────────────────────────
app = FastAPI(
    title="chainkit assistant",
    description="Conversational ReAct agent over an OpenAI-compatible API.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request-ID middleware ────────────────────────────────────────────
@app.middleware("http")
async def add_request_id(request: Request, call_next) -> Response:
    """Attach a unique request ID to every request for log correlation.

    The ID is returned in the ``X-Request-ID`` response header; a client
    supplied ID is echoed back unchanged.  The log line is written once the
    response is ready so it carries the status and elapsed time.  For SSE
    this is when streaming starts, not when it ends.
    """
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "[%s] %s %s -> %d in %.0fms",
        request_id, request.method, request.url.path, response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    response.headers["X-Request-ID"] = request_id
    return response


# ── Register routes ──────────────────────────────────────────────────
app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "chainkit assistant",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/health",
    }


# ── CLI entry point ──────────────────────────────────────────────────


def serve() -> None:
    """``chainkit-server``: run the API under uvicorn."""
    parser = argparse.ArgumentParser(description="Serve the chainkit assistant over HTTP")
    parser.add_argument("--host", default=SERVER_HOST)
    parser.add_argument("--port", type=int, default=SERVER_PORT)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development)")
    args = parser.parse_args()

    logger.info("Starting chainkit API server on %s:%d", args.host, args.port)
    uvicorn.run("chainkit.server:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    serve()
