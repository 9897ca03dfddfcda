"""
Static configuration: syllabus URL, known departments, and the label set
used to classify curriculum rows.
"""
from __future__ import annotations

from dataclasses import dataclass

# KOSEN Web Syllabus public subject list
SYLLABUS_URL = (
    "https://syllabus.kosen-k.go.jp/Pages/PublicSubjects"
    "?school_id={school_id}&department_id={department_id}&year={year}&lang={lang}"
)
DEFAULT_SCHOOL_ID = 27  # 明石高専
DEFAULT_LANG = "ja"
DEFAULT_TIMEOUT = 60  # seconds
DEFAULT_OUTPUT_ROOT = "curriculum"

GRADES = (1, 2, 3, 4, 5)


@dataclass(frozen=True)
class ParseConfig:
    """Labels and filters applied when turning table rows into records."""

    general_label: str = "一般"
    required_label: str = "必修"
    # Regular expressions searched in the course title
    exclude_patterns: tuple[str, ...] = ("海外研修", "留学生")
    header_rows: int = 4
    min_cells: int = 27


DEFAULT_PARSE_CONFIG = ParseConfig()


@dataclass(frozen=True)
class Department:
    code: str
    name: str
    department_id: int
    # Department holding grades 1-3 when the curriculum is split into tracks
    shared_department_id: int | None = None
    shared_grades: tuple[int, ...] = (1, 2, 3)
    track_grades: tuple[int, ...] = (4, 5)

    @property
    def is_split(self) -> bool:
        return self.shared_department_id is not None


# 電気情報工学科 grades 1-3 are common to ED and EJ
E_COMMON_DEPARTMENT_ID = 12

DEPARTMENTS: dict[str, Department] = {
    "M": Department("M", "機械工学科", 11),
    "ED": Department("ED", "電気情報工学科（電気電子工学コース）", 13, E_COMMON_DEPARTMENT_ID),
    "EJ": Department("EJ", "電気情報工学科（情報工学コース）", 14, E_COMMON_DEPARTMENT_ID),
    "C": Department("C", "都市システム工学科", 15),
    "A": Department("A", "建築学科", 16),
}


class UnknownCourseCodeError(ValueError):
    """Raised when a course code is not one of DEPARTMENTS."""


def get_department(course_code: str) -> Department:
    try:
        return DEPARTMENTS[course_code]
    except KeyError:
        raise UnknownCourseCodeError(
            f"Unknown course code: {course_code}. Available codes: {', '.join(DEPARTMENTS)}"
        ) from None


def syllabus_url(
    department_id: int,
    year: int | str,
    school_id: int = DEFAULT_SCHOOL_ID,
    lang: str = DEFAULT_LANG,
) -> str:
    """Build the PublicSubjects URL for one department and academic year."""
    return SYLLABUS_URL.format(
        school_id=school_id, department_id=department_id, year=year, lang=lang
    )
