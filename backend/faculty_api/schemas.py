from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class FacultyCreateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, coerce_numbers_to_str=True)

    name: Optional[str] = None


class FacultyItem(BaseModel):
    id: int
    name: str


class HealthResponse(BaseModel):
    status: str
