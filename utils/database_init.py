import os
import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import aiosqlite

DEFAULT_DATABASE_DIR = Path(__file__).resolve().parent.parent / "database"
GALLERY_FILENAME = "faces.db"

FACE_SCHEMA = """
CREATE TABLE IF NOT EXISTS FACE (
    label TEXT PRIMARY KEY,
    descriptors TEXT NOT NULL,
    trained_at INTEGER NOT NULL
)
"""


def resolve_gallery_dir(database_dir: Optional[Path | str] = None) -> Path:
    """Return the directory holding the face gallery, creating it if missing."""
    raw = database_dir or os.getenv("DATABASE_DIR") or DEFAULT_DATABASE_DIR
    gallery_dir = Path(raw).expanduser()

    if gallery_dir.exists() and not gallery_dir.is_dir():
        raise RuntimeError(f"DATABASE_DIR={str(raw)!r} is a file; expected a directory ({gallery_dir})")
    try:
        gallery_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RuntimeError(f"Cannot create face gallery directory {gallery_dir}") from exc
    return gallery_dir


class AsyncDatabaseInitializer:
    """
    Own the SQLite file behind the enrolled face gallery.

    Enrollments outlive restarts, so startup only creates the FACE table when
    it is missing. `connection()` lazily runs that step, which lets tests
    point the gallery at a temporary DATABASE_DIR without a lifespan.
    """

    schema_attempts = 3

    def __init__(self, database_dir: Optional[Path | str] = None) -> None:
        self.db_dir = resolve_gallery_dir(database_dir)
        self.db_path = self.db_dir / GALLERY_FILENAME
        self._ready = False

    async def ensure_database(self) -> None:
        if self._ready:
            return

        for attempt in range(1, self.schema_attempts + 1):
            try:
                async with aiosqlite.connect(self.db_path) as db:
                    await db.execute(FACE_SCHEMA)
                    await db.commit()
                break
            except aiosqlite.OperationalError:
                # another process may hold the write lock while enrolling
                if attempt >= self.schema_attempts:
                    raise
                await asyncio.sleep(0.1 * attempt)

        self._ready = True

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield an `aiosqlite.Connection` to the gallery, closing it afterwards."""
        await self.ensure_database()
        conn = await aiosqlite.connect(self.db_path)
        try:
            yield conn
        finally:
            await conn.close()
