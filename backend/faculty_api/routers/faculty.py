from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Query, Response

from ..faculty_service import FacultyService, parse_faculty_id
from ..schemas import FacultyCreateRequest, FacultyItem

router = APIRouter(prefix="/api/faculty", tags=["faculty"])
logger = logging.getLogger("faculty.routes")

service = FacultyService()


@router.get("", response_model=list[FacultyItem], summary="List faculty names")
def list_faculty(
    q: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None, include_in_schema=False),
) -> list[FacultyItem]:
    """Return all faculty ordered by name, optionally filtered by a case-insensitive substring."""

    term = q if q is not None else search
    rows = service.list_faculty(term or "")
    return [FacultyItem(**row) for row in rows]


@router.get(
    "/{faculty_id}",
    response_model=FacultyItem,
    responses={400: {"description": "Invalid id"}, 404: {"description": "Not found"}},
)
def get_faculty(faculty_id: str) -> FacultyItem:
    row = service.get_faculty(parse_faculty_id(faculty_id))
    return FacultyItem(**row)


@router.post(
    "",
    response_model=FacultyItem,
    status_code=201,
    responses={400: {"description": "Name is required"}, 409: {"description": "Name already exists"}},
)
def create_faculty(payload: Optional[FacultyCreateRequest] = Body(default=None)) -> FacultyItem:
    row = service.create_faculty(payload.name if payload else None)
    return FacultyItem(**row)


@router.delete(
    "/{faculty_id}",
    status_code=204,
    response_class=Response,
    responses={400: {"description": "Invalid id"}, 404: {"description": "Not found"}},
)
def delete_faculty(faculty_id: str) -> Response:
    service.delete_faculty(parse_faculty_id(faculty_id))
    return Response(status_code=204)
