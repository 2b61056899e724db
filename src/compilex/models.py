"""Pydantic models for request and response bodies.

Optional response fields are left out of the JSON entirely when unset, so a
successful execution serialises as ``{"output": ...}`` and a failure as
``{"error": ...}`` with ``output`` only when there is text to show.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, StrictStr


class ExecuteRequest(BaseModel):
    """Request body for executing a snippet."""

    language: StrictStr = Field(
        default="",
        description="Language identifier, e.g. 'python', 'javascript', 'java', 'cpp', 'ruby'.",
    )
    code: StrictStr = Field(default="", description="Source code to compile and run.")


class ExecuteResponse(BaseModel):
    output: Optional[str] = Field(default=None, description="Captured program or compiler output.")
    error: Optional[str] = Field(default=None, description="Failure description, if any.")


class HealthResponse(BaseModel):
    status: str
    languages: List[str]
    timestamp: datetime
