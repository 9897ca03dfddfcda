"""
Fetch KOSEN Web Syllabus pages with a headless Chrome and parse them.

The PublicSubjects page builds its curriculum table with JavaScript, so the
HTML is read from a real browser once a table with data rows is present.
"""
from __future__ import annotations

from typing import List

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

from .config import DEFAULT_PARSE_CONFIG, DEFAULT_SCHOOL_ID, DEFAULT_TIMEOUT, Department, ParseConfig
from .curriculum import build_curriculum
from .curriculum_html import TableSelector, parse_curriculum_html, select_largest_table
from .models import CourseRecord

POLL_FREQUENCY = 0.2  # seconds


class NavigationError(RuntimeError):
    """Raised when the browser cannot start or a page fails to load."""


def create_driver(headless: bool = True) -> webdriver.Chrome:
    """Create a Chrome WebDriver instance."""
    options = Options()
    if headless:
        options.add_argument("--headless=new")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--lang=ja-JP")
    try:
        service = Service(ChromeDriverManager().install())
        return webdriver.Chrome(service=service, options=options)
    except Exception as e:
        raise NavigationError(
            "Could not start Chrome for the KOSEN Web Syllabus fetch. "
            f"Install Chrome and run again.\nError: {e}"
        ) from e


def _table_has_data_rows(header_rows: int):
    """Wait condition: some <table> has more rows than its header block."""

    def _check(driver) -> bool:
        return any(
            len(table.find_elements(By.TAG_NAME, "tr")) > header_rows
            for table in driver.find_elements(By.TAG_NAME, "table")
        )

    return _check


def fetch_page_html(
    driver,
    url: str,
    timeout: int = DEFAULT_TIMEOUT,
    header_rows: int = DEFAULT_PARSE_CONFIG.header_rows,
) -> str:
    """Load `url` and return the page HTML once the curriculum table has rows."""
    print(f"Fetching: {url}")
    driver.set_page_load_timeout(timeout)
    try:
        driver.get(url)
        WebDriverWait(driver, timeout, poll_frequency=POLL_FREQUENCY).until(
            _table_has_data_rows(header_rows)
        )
    except TimeoutException as e:
        raise NavigationError(
            f"Timed out after {timeout}s waiting for the curriculum table at {url}"
        ) from e
    except WebDriverException as e:
        raise NavigationError(f"Could not load {url}: {e.msg or e}") from e
    return driver.page_source


def fetch_curriculum(
    year: int | str,
    department: Department,
    timeout: int = DEFAULT_TIMEOUT,
    school_id: int = DEFAULT_SCHOOL_ID,
    headless: bool = True,
    config: ParseConfig = DEFAULT_PARSE_CONFIG,
    select_table: TableSelector = select_largest_table,
) -> List[CourseRecord]:
    """
    Open one browser session and collect every record of `department`
    for `year`, merging the shared lower-grade page for split departments.

    :raises NavigationError: if Chrome cannot start or a page fails to load.
    :raises MissingTableError: if a page has no curriculum table.
    """
    driver = create_driver(headless=headless)
    try:
        def fetch_records(url: str) -> List[CourseRecord]:
            html = fetch_page_html(driver, url, timeout, config.header_rows)
            return parse_curriculum_html(html, config, select_table)

        return build_curriculum(year, department, fetch_records, school_id)
    finally:
        driver.quit()
