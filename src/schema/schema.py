from typing import Any

from pydantic import BaseModel, Field


class SessionView(BaseModel):
    """Session contents as seen by the current request."""

    data: dict[str, Any] = Field(
        description="Session data, without the session id.",
        examples=[{"message": "hello"}],
    )


class SessionUpdate(BaseModel):
    """Keys to merge into (or replace) the session."""

    data: dict[str, Any] = Field(
        description="JSON-serializable values keyed by name.",
        examples=[{"message": "hello"}],
    )


class StatusResponse(BaseModel):
    status: str = "ok"
