"""Data models for curriculum records."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class Divide(IntEnum):
    GENERAL = 0  # 一般
    SPECIALIZED = 1  # 専門


class Term(IntEnum):
    FULL_YEAR = 0  # 通年
    FIRST_HALF = 1  # 前期
    SECOND_HALF = 2  # 後期


@dataclass
class CourseRecord:
    """One course row of a department curriculum."""

    divide: Divide
    required: bool
    title: str
    grade: int  # 1-5, 0 = undetermined
    term: Term
    credit: int
    lecturer: str
    id: int | None = field(default=None)  # assigned per grade when grouping

    def to_dict(self) -> dict:
        """Serialize with the key order of the published curriculum JSON."""
        return {
            "divide": int(self.divide),
            "required": self.required,
            "grade": self.grade,
            "title": self.title,
            "term": int(self.term),
            "credit": self.credit,
            "lecturer": self.lecturer,
            "id": self.id,
        }
