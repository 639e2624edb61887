from __future__ import annotations

from typing import Optional, Protocol


class DirectoryRepository(Protocol):
    """Counts over the organization's schools, teachers and students."""

    def count_schools(self) -> int:
        raise NotImplementedError

    def count_teachers(self) -> int:
        raise NotImplementedError

    def count_students(self, *, school_id: Optional[int] = None) -> int:
        raise NotImplementedError
