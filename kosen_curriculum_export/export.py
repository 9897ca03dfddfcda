"""
Export curriculum records to JSON, one file per grade.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Sequence

from .config import DEFAULT_OUTPUT_ROOT
from .models import CourseRecord


def grade_path(
    year: int | str,
    course_code: str,
    grade: int,
    output_root: str | Path = DEFAULT_OUTPUT_ROOT,
) -> Path:
    """curriculum/<year>/<course_code>/<grade>.json"""
    return Path(output_root) / str(year) / course_code / f"{grade}.json"


def export_json(records: Sequence[CourseRecord], out_path: str | Path) -> None:
    """Write records as a 2-space indented JSON array, creating parent dirs."""
    print(f"Saving to {out_path}...")
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(
        json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


def export_curriculum(
    by_grade: Dict[int, List[CourseRecord]],
    year: int | str,
    course_code: str,
    output_root: str | Path = DEFAULT_OUTPUT_ROOT,
) -> List[Path]:
    """Write every grade bucket (empty ones included) and return the paths."""
    paths = []
    for grade in sorted(by_grade):
        path = grade_path(year, course_code, grade, output_root)
        export_json(by_grade[grade], path)
        paths.append(path)
    return paths
