"""
Command-line interface: scrape one department curriculum and export it.
"""
from __future__ import annotations

import argparse
import warnings

# Suppress urllib3/OpenSSL warning on systems with LibreSSL (no impact on functionality)
warnings.filterwarnings("ignore", message=".*urllib3.*OpenSSL.*", module="urllib3")
import sys

from . import __version__
from .config import (
    DEFAULT_OUTPUT_ROOT,
    DEFAULT_SCHOOL_ID,
    DEFAULT_TIMEOUT,
    DEPARTMENTS,
    UnknownCourseCodeError,
    get_department,
)
from .curriculum import group_by_grade
from .curriculum_fetch import NavigationError, fetch_curriculum
from .curriculum_html import MissingTableError
from .export import export_curriculum


def _print_usage(parser: argparse.ArgumentParser) -> None:
    parser.print_usage()
    print(f"Course codes: {', '.join(DEPARTMENTS)}")
    print(f"Example: {parser.prog} 2025 EJ")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="kosen-curriculum",
        description=(
            "Scrape a department curriculum from the KOSEN Web Syllabus and save it as\n"
            "curriculum/<year>/<course_code>/<grade>.json.\n"
            "ED/EJ take grades 1-3 from the common 電気情報工学科 page and grades 4-5 from the course page."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("year", nargs="?", help="Academic year, e.g. 2025")
    parser.add_argument(
        "course_code",
        nargs="?",
        help=f"Department code: {', '.join(DEPARTMENTS)}",
    )
    parser.add_argument(
        "-o",
        "--output-root",
        default=DEFAULT_OUTPUT_ROOT,
        help=f"Directory under which <year>/<course_code>/ is created. Default: {DEFAULT_OUTPUT_ROOT}",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=DEFAULT_TIMEOUT,
        help=f"Page load timeout in seconds. Default: {DEFAULT_TIMEOUT}",
    )
    parser.add_argument(
        "--school-id",
        type=int,
        default=DEFAULT_SCHOOL_ID,
        help=f"KOSEN Web Syllabus school_id. Default: {DEFAULT_SCHOOL_ID}",
    )
    parser.add_argument(
        "--show-browser",
        action="store_true",
        help="Run Chrome with a visible window instead of headless.",
    )
    args = parser.parse_args(argv)

    if not args.year or not args.course_code:
        _print_usage(parser)
        return 1

    try:
        department = get_department(args.course_code)
    except UnknownCourseCodeError as e:
        print(f"Error: {e}", file=sys.stderr)
        _print_usage(parser)
        return 1

    try:
        records = fetch_curriculum(
            args.year,
            department,
            timeout=args.timeout,
            school_id=args.school_id,
            headless=not args.show_browser,
        )
    except (NavigationError, MissingTableError) as e:
        print(f"Error fetching curriculum: {e}", file=sys.stderr)
        return 1

    print(f"Total: {len(records)} subjects")

    by_grade = group_by_grade(records)
    dropped = len(records) - sum(len(v) for v in by_grade.values())
    if dropped:
        print(
            f"Warning: skipped {dropped} subject(s) with no hours in any grade",
            file=sys.stderr,
        )

    export_curriculum(by_grade, args.year, args.course_code, args.output_root)
    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
