"""
Shared schema primitives used across the API.
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(from_attributes=True)

    error: str
    code: str
    details: Optional[dict[str, Any]] = None


class OkResponse(BaseModel):
    ok: bool = True


def strip_required(v):
    """Shared `mode="before"` validator body: strip strings and reject blanks."""
    stripped = v.strip() if isinstance(v, str) else v
    if isinstance(stripped, str) and not stripped:
        raise ValueError("must not be empty after stripping whitespace")
    return stripped
