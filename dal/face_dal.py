"""Async Data Access Layer for the FACE table.

Provides FaceDAL with the enrollment CRUD used by the face training page
and the gallery snapshot the audience scheduler loads at stream start.
"""

from __future__ import annotations

import json
import time
from typing import List, Optional, Sequence

from models.face_record import EnrolledFace
from utils.database_init import AsyncDatabaseInitializer


class FaceDAL:
    """Data access layer for enrolled face records."""

    _COLUMNS = ("label", "descriptors", "trained_at")
    _COLUMN_LIST = ", ".join(_COLUMNS)

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def upsert_face(self, face: EnrolledFace) -> EnrolledFace:
        """Insert a face, overwriting any previous enrollment of the same label.

        Args:
            face: EnrolledFace to store; `trained_at` defaults to now.

        Returns:
            The stored record with `trained_at` filled in.
        """
        trained_at = face.trained_at or int(time.time())
        async with self._db.connection() as conn:
            await conn.execute(
                f"INSERT OR REPLACE INTO FACE ({self._COLUMN_LIST}) VALUES (?, ?, ?)",
                (face.label, json.dumps(face.descriptors), trained_at),
            )
            await conn.commit()
        return EnrolledFace(label=face.label, descriptors=face.descriptors, trained_at=trained_at)

    async def get_face(self, label: str) -> Optional[EnrolledFace]:
        """Return the EnrolledFace for `label`, or None if not found."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM FACE WHERE label = ?",
                (label,),
            )
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    async def list_faces(self) -> List[EnrolledFace]:
        """Return every enrolled face ordered by label."""
        async with self._db.connection() as conn:
            cur = await conn.execute(f"SELECT {self._COLUMN_LIST} FROM FACE ORDER BY label")
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def delete_face(self, label: str) -> bool:
        """Delete a FACE row by label. Returns True if a row was deleted."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM FACE WHERE label = ?", (label,))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
            return bool(changed and changed[0] > 0)

    async def clear_faces(self) -> int:
        """Delete every enrolled face and return the count removed."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM FACE")
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            deleted = await cur.fetchone()
            return int(deleted[0]) if deleted and deleted[0] is not None else 0

    @staticmethod
    def _row_to_record(row: Sequence[object]) -> EnrolledFace:
        """Convert a DB row tuple into an EnrolledFace."""
        return EnrolledFace(
            label=row[0],
            descriptors=json.loads(row[1]),
            trained_at=row[2],
        )
