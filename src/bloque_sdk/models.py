"""Pydantic models for transport requests."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]


class RequestOptions(BaseModel):
    method: HttpMethod
    path: str = Field(..., min_length=1)
    body: Optional[Any] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    # milliseconds; 0 disables the timeout for this request
    timeout: Optional[int] = Field(default=None, ge=0)

    @field_validator("path")
    @classmethod
    def _path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("path must start with '/'")
        return value


__all__ = ["HttpMethod", "RequestOptions"]
