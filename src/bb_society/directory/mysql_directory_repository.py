from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import DirectoryRepository


class MySQLDirectoryRepository(DirectoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _count(self, sql: str, params: tuple = ()) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def count_schools(self) -> int:
        return self._count("SELECT COUNT(*) AS total FROM schools")

    def count_teachers(self) -> int:
        return self._count("SELECT COUNT(*) AS total FROM teachers")

    def count_students(self, *, school_id: Optional[int] = None) -> int:
        if school_id is None:
            return self._count("SELECT COUNT(*) AS total FROM students")
        return self._count("SELECT COUNT(*) AS total FROM students WHERE school_id=%s", (int(school_id),))
