"""
Assemble a department curriculum from one or two syllabus pages and split
it into per-grade lists ready for export.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Sequence

from .config import DEFAULT_SCHOOL_ID, GRADES, Department, syllabus_url
from .models import CourseRecord

RecordFetcher = Callable[[str], List[CourseRecord]]


def _in_grades(records: Iterable[CourseRecord], grades: Sequence[int]) -> List[CourseRecord]:
    return [r for r in records if r.grade in grades]


def reconcile_curriculum(
    shared: Sequence[CourseRecord],
    track: Sequence[CourseRecord],
    shared_grades: Sequence[int] = (1, 2, 3),
    track_grades: Sequence[int] = (4, 5),
) -> List[CourseRecord]:
    """
    Merge a split curriculum: lower grades from the page shared by all
    tracks, upper grades from the track page. Shared records come first;
    each source keeps its own order.
    """
    return _in_grades(shared, shared_grades) + _in_grades(track, track_grades)


def build_curriculum(
    year: int | str,
    department: Department,
    fetch_records: RecordFetcher,
    school_id: int = DEFAULT_SCHOOL_ID,
) -> List[CourseRecord]:
    """
    Fetch and merge every record of a department for one academic year.

    `fetch_records` maps a syllabus URL to the parsed records of that page.
    For split departments the shared page is always fetched first.
    """
    track_url = syllabus_url(department.department_id, year, school_id)
    if not department.is_split:
        return fetch_records(track_url)

    shared_url = syllabus_url(department.shared_department_id, year, school_id)
    shared = fetch_records(shared_url)
    track = fetch_records(track_url)
    merged = reconcile_curriculum(
        shared, track, department.shared_grades, department.track_grades
    )

    for grades in (department.shared_grades, department.track_grades):
        count = sum(1 for r in merged if r.grade in grades)
        print(f"Found {count} subjects (grades {_grade_span(grades)})")
    return merged


def _grade_span(grades: Sequence[int]) -> str:
    return f"{min(grades)}-{max(grades)}"


def group_by_grade(records: Iterable[CourseRecord]) -> Dict[int, List[CourseRecord]]:
    """
    Bucket records by grade 1-5 and number each bucket from 0.

    Records with grade 0 (no hours in any quarter) or any other value
    outside 1-5 are left out. Input records are not modified.
    """
    by_grade: Dict[int, List[CourseRecord]] = {g: [] for g in GRADES}
    for record in records:
        bucket = by_grade.get(record.grade)
        if bucket is not None:
            bucket.append(replace(record, id=len(bucket)))
    return by_grade
