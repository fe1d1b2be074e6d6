"""FastAPI route definitions for the chainkit assistant API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse

from chainkit.agents.executor import ExecutorEvent
from chainkit.api.schemas import ChatRequest, ChatResponse, HealthResponse, SessionResetResponse
from chainkit.api.sessions import SessionStore
from chainkit.errors import APIError, RateLimitExceededError
from chainkit.schemas.agent import AgentAction, AgentFinish, AgentStep

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_sessions(request: Request) -> SessionStore:
    """Retrieve the session store from app state.

    The store is created once during the FastAPI lifespan (see
    ``server.py``).
    """
    sessions = getattr(request.app.state, "sessions", None)
    if sessions is None:
        raise HTTPException(
            status_code=503,
            detail="The assistant is still starting up. Please try again in a moment.",
        )
    return sessions


def _http_error(exc: Exception) -> HTTPException:
    """Client-facing error for a failed agent run.  Details stay in the logs."""
    if isinstance(exc, RateLimitExceededError):
        return HTTPException(status_code=429, detail="The model provider is rate limiting requests. Please retry shortly.")
    if isinstance(exc, APIError):
        return HTTPException(status_code=502, detail="An upstream service could not be reached. Please try again.")
    return HTTPException(status_code=500, detail="An internal error occurred. Please try again.")


def _sse(event: str, data: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


def _event_to_sse(event: ExecutorEvent) -> str:
    if isinstance(event, AgentAction):
        return _sse("action", {"tool": event.tool, "tool_input": event.tool_input})
    if isinstance(event, AgentStep):
        return _sse("step", {"tool": event.action.tool, "observation": event.observation})
    if isinstance(event, AgentFinish):
        return _sse("finish", {"output": event.return_values})
    raise TypeError(f"Unexpected agent event: {type(event).__name__}")


# ── Endpoints ────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
async def health_check(http_request: Request):
    """Liveness plus the number of conversations held in memory."""
    sessions = getattr(http_request.app.state, "sessions", None)
    return HealthResponse(active_sessions=len(sessions) if sessions is not None else 0)


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, http_request: Request):
    """Send a message to the assistant and get its final answer.

    The session_id selects the conversation memory, so follow-up messages
    see the earlier exchange.

    ``executor.run()`` blocks on the OpenAI API and on tools, so it is
    offloaded to a thread via ``asyncio.to_thread``.
    """
    executor = _get_sessions(http_request).get(request.session_id)
    request_id = getattr(http_request.state, "request_id", "?")

    try:
        reply = await asyncio.to_thread(executor.run, request.message)
        return ChatResponse(reply=reply, session_id=request.session_id)

    except Exception as e:
        # Log the full traceback server-side, never send it to the client
        logger.exception("[%s] Error processing chat request", request_id)
        raise _http_error(e) from e


@router.post("/chat/stream")
async def chat_stream(request: ChatRequest, http_request: Request):
    """Stream the agent's progress as Server-Sent Events.

    Events, in order: ``action`` (tool chosen), ``step`` (tool observation),
    repeated per tool call, then ``finish`` with the final answer.  A failure
    mid-stream is reported as an ``error`` event.
    """
    executor = _get_sessions(http_request).get(request.session_id)
    request_id = getattr(http_request.state, "request_id", "?")

    async def event_generator() -> AsyncIterator[str]:
        try:
            async for event in executor.astream(request.message):
                yield _event_to_sse(event)
        except Exception as exc:
            logger.exception("[%s] Error while streaming chat response", request_id)
            yield _sse("error", {"detail": _http_error(exc).detail})

    return StreamingResponse(event_generator(), media_type="text/event-stream")


@router.delete("/sessions/{session_id}", response_model=SessionResetResponse)
async def reset_session(session_id: str, http_request: Request):
    """Forget a conversation; the next message starts with empty memory."""
    existed = _get_sessions(http_request).reset(session_id)
    logger.info("Session %s reset (existed=%s)", session_id, existed)
    return SessionResetResponse(session_id=session_id, existed=existed)
