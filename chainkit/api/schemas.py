"""Pydantic schemas for the FastAPI endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Incoming chat message from a client."""

    message: str = Field(..., min_length=1, max_length=8000, description="The user's message")
    session_id: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Unique session identifier for conversation continuity",
    )


class ChatResponse(BaseModel):
    """Final answer from the assistant."""

    reply: str = Field(..., description="The assistant's final answer")
    session_id: str = Field(..., description="The session ID for this conversation")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    service: str = "chainkit"
    active_sessions: int = 0


class SessionResetResponse(BaseModel):
    """Result of forgetting a conversation."""

    session_id: str
    existed: bool = Field(..., description="Whether a live session with this ID was dropped, even one with no messages yet")
