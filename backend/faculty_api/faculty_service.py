from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

from fastapi import HTTPException
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .db import get_db

logger = logging.getLogger("faculty.service")

_INTEGER_ID = re.compile(r"^[+-]?\d+$")

# SQLite INTEGER storage is a signed 64-bit value.
_MIN_ID = -(2**63)
_MAX_ID = 2**63 - 1


def parse_faculty_id(raw: str) -> int:
    candidate = (raw or "").strip()
    if not _INTEGER_ID.match(candidate):
        raise HTTPException(status_code=400, detail="Invalid id")
    return int(candidate)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class FacultyService:
    # ---------- SQL helpers ----------
    def _one(
        self,
        session: Session,
        query: str,
        params: Optional[dict[str, Any]] = None,
    ) -> Optional[Mapping[str, Any]]:
        return session.execute(text(query), params or {}).mappings().first()

    def _all(
        self,
        session: Session,
        query: str,
        params: Optional[dict[str, Any]] = None,
    ) -> list[Mapping[str, Any]]:
        return list(session.execute(text(query), params or {}).mappings().all())

    # ---------- Faculty ----------
    def list_faculty(self, search: str = "") -> list[dict[str, Any]]:
        term = (search or "").strip()
        with get_db() as session:
            if term:
                rows = self._all(
                    session,
                    """
                    SELECT id, name
                    FROM faculty
                    WHERE LOWER(name) LIKE LOWER(:pattern) ESCAPE '\\'
                    ORDER BY name ASC
                    """,
                    {"pattern": _like_pattern(term)},
                )
            else:
                rows = self._all(session, "SELECT id, name FROM faculty ORDER BY name ASC")
        return [dict(row) for row in rows]

    def get_faculty(self, faculty_id: int) -> dict[str, Any]:
        if not _MIN_ID <= faculty_id <= _MAX_ID:
            raise HTTPException(status_code=404, detail="Not found")
        with get_db() as session:
            row = self._one(
                session,
                "SELECT id, name FROM faculty WHERE id = :faculty_id",
                {"faculty_id": faculty_id},
            )
        if not row:
            raise HTTPException(status_code=404, detail="Not found")
        return dict(row)

    def create_faculty(self, name: Optional[str]) -> dict[str, Any]:
        candidate = (name or "").strip()
        if not candidate:
            raise HTTPException(status_code=400, detail="Name is required")

        try:
            with get_db() as session:
                row = self._one(
                    session,
                    "INSERT INTO faculty (name) VALUES (:name) RETURNING id, name",
                    {"name": candidate},
                )
                created = dict(row)
        except IntegrityError as exc:
            raise HTTPException(status_code=409, detail="Name already exists") from exc

        logger.info(
            "Faculty created",
            extra={"event": "faculty_created", "faculty_id": created["id"]},
        )
        return created

    def delete_faculty(self, faculty_id: int) -> None:
        if not _MIN_ID <= faculty_id <= _MAX_ID:
            raise HTTPException(status_code=404, detail="Not found")
        with get_db() as session:
            result = session.execute(
                text("DELETE FROM faculty WHERE id = :faculty_id"),
                {"faculty_id": faculty_id},
            )
            deleted = result.rowcount
        if not deleted:
            raise HTTPException(status_code=404, detail="Not found")

        logger.info(
            "Faculty deleted",
            extra={"event": "faculty_deleted", "faculty_id": faculty_id},
        )
