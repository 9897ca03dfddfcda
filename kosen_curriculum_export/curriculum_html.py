"""
Parse the KOSEN Web Syllabus "PublicSubjects" page into course records.

Page structure:
- The curriculum is the largest <table> on the page.
- The first 4 rows are headers (区分, 必修/選択, 授業科目, ..., 学年別週当授業時数).
- Every data row has at least 27 <td> cells:
    0: 一般 / 専門
    1: 必修 / 選択
    2: 授業科目 (title, often rendered twice on separate lines)
    5: 単位数
    6-25: 授業時数 per quarter, 1年1Q ... 5年4Q
    26: 担当教員
"""
from __future__ import annotations

import re
from typing import Callable, List, Optional, Sequence

from bs4 import BeautifulSoup, Tag  # type: ignore[import]

from .config import DEFAULT_PARSE_CONFIG, ParseConfig
from .models import CourseRecord, Divide, Term

QUARTERS_PER_GRADE = 4
GRADE_COUNT = 5
QUARTER_COUNT = QUARTERS_PER_GRADE * GRADE_COUNT

_DIVIDE_CELL = 0
_REQUIRED_CELL = 1
_TITLE_CELL = 2
_CREDIT_CELL = 5
_QUARTER_START_CELL = 6
_LECTURER_CELL = 26

_LEADING_INT = re.compile(r"^\s*([0-9]+)")


class MissingTableError(ValueError):
    """Raised when no curriculum table can be found on a page."""


TableSelector = Callable[[List[Tag]], Tag]


# ──────────────────────────────────────────────────────────────────
#  Cell helpers
# ──────────────────────────────────────────────────────────────────

def _parse_int(text: str) -> int:
    """Leading ASCII-digit parse ('2', ' 2単位' -> 2); anything else, '２' included, -> 0."""
    m = _LEADING_INT.match(text or "")
    return int(m.group(1)) if m else 0


def normalize_title(text: str) -> str:
    """
    The syllabus often renders a title twice on separate lines; keep the
    first non-empty line.
    """
    stripped = (text or "").strip()
    parts = [s.strip() for s in stripped.split("\n") if s.strip()]
    return parts[0] if parts else stripped


def normalize_lecturer(text: str) -> str:
    """Join multiple lecturers as '山田太郎、　佐藤一郎'."""
    return (
        (text or "")
        .strip()
        .replace("\n", "")
        .replace(" ", "　")
        .replace(",", "、")
    )


# ──────────────────────────────────────────────────────────────────
#  Grade / term
# ──────────────────────────────────────────────────────────────────

def decode_quarter_grid(quarters: Sequence[int]) -> tuple[int, Term]:
    """
    Infer (grade, term) from the 20 per-quarter hour counts.

    Grade is the first year (1-5) with any hours; 0 when the grid is empty.
    Term looks only at that year's quarters: hours in 1Q/2Q only -> first
    half, 3Q/4Q only -> second half, otherwise full year.
    """
    if len(quarters) != QUARTER_COUNT:
        raise ValueError(f"Expected {QUARTER_COUNT} quarters, got {len(quarters)}")

    for g in range(GRADE_COUNT):
        start = g * QUARTERS_PER_GRADE
        group = quarters[start:start + QUARTERS_PER_GRADE]
        if any(q > 0 for q in group):
            has_front = group[0] > 0 or group[1] > 0
            has_back = group[2] > 0 or group[3] > 0
            if has_front and not has_back:
                term = Term.FIRST_HALF
            elif has_back and not has_front:
                term = Term.SECOND_HALF
            else:
                term = Term.FULL_YEAR
            return g + 1, term
    return 0, Term.FULL_YEAR


# ──────────────────────────────────────────────────────────────────
#  Rows
# ──────────────────────────────────────────────────────────────────

def parse_row(
    cells: Sequence[str],
    config: ParseConfig = DEFAULT_PARSE_CONFIG,
) -> Optional[CourseRecord]:
    """Turn one row of cell texts into a record; None for short rows."""
    if len(cells) < config.min_cells:
        return None

    quarters = [
        _parse_int(cells[_QUARTER_START_CELL + i]) for i in range(QUARTER_COUNT)
    ]
    grade, term = decode_quarter_grid(quarters)

    return CourseRecord(
        divide=(
            Divide.GENERAL
            if cells[_DIVIDE_CELL].strip() == config.general_label
            else Divide.SPECIALIZED
        ),
        required=cells[_REQUIRED_CELL].strip() == config.required_label,
        title=normalize_title(cells[_TITLE_CELL]),
        grade=grade,
        term=term,
        credit=_parse_int(cells[_CREDIT_CELL]),
        lecturer=normalize_lecturer(cells[_LECTURER_CELL]),
    )


def parse_rows(
    rows: Sequence[Sequence[str]],
    config: ParseConfig = DEFAULT_PARSE_CONFIG,
) -> List[CourseRecord]:
    records: List[CourseRecord] = []
    for cells in rows:
        record = parse_row(cells, config)
        if record is not None:
            records.append(record)
    return records


def filter_records(
    records: Sequence[CourseRecord],
    exclude_patterns: Sequence[str],
) -> List[CourseRecord]:
    """Drop records whose title matches any exclusion pattern, keeping order."""
    if not exclude_patterns:
        return list(records)
    pattern = re.compile("|".join(f"(?:{p})" for p in exclude_patterns))
    return [r for r in records if not pattern.search(r.title)]


# ──────────────────────────────────────────────────────────────────
#  Table location
# ──────────────────────────────────────────────────────────────────

def _table_rows(table: Tag) -> List[Tag]:
    """<tr> elements belonging to this table, excluding nested tables."""
    return [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]


def select_largest_table(tables: List[Tag]) -> Tag:
    """Pick the table with the most rows; the first one wins on a tie."""
    best: Tag | None = None
    max_rows = 0
    for table in tables:
        n = len(_table_rows(table))
        if n > max_rows:
            max_rows = n
            best = table
    if best is None:
        raise MissingTableError("Could not find curriculum table in HTML.")
    return best


def select_table_by_id(table_id: str) -> TableSelector:
    """Strategy picking the table with a given id attribute."""

    def _select(tables: List[Tag]) -> Tag:
        for table in tables:
            if table.get("id") == table_id:
                return table
        raise MissingTableError(f"Could not find table with id {table_id!r} in HTML.")

    return _select


def locate_curriculum_rows(
    soup: BeautifulSoup,
    select_table: TableSelector = select_largest_table,
    header_rows: int = DEFAULT_PARSE_CONFIG.header_rows,
) -> List[List[str]]:
    """
    Select the curriculum table and return its data rows as lists of
    <td> text, header rows removed.
    """
    table = select_table(soup.find_all("table"))
    rows = _table_rows(table)[header_rows:]
    return [[td.get_text() for td in tr.find_all("td")] for tr in rows]


def parse_curriculum_html(
    html: str,
    config: ParseConfig = DEFAULT_PARSE_CONFIG,
    select_table: TableSelector = select_largest_table,
) -> List[CourseRecord]:
    """
    Parse a PublicSubjects page into filtered course records, in table order.

    :raises MissingTableError: if the page has no table.
    """
    soup = BeautifulSoup(html, "html.parser")
    rows = locate_curriculum_rows(soup, select_table, config.header_rows)
    return filter_records(parse_rows(rows, config), config.exclude_patterns)
