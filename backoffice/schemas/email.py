from __future__ import annotations

from pydantic import BaseModel, Field


class EmailTestRequest(BaseModel):
    email: str | None = Field(default=None, max_length=255)
