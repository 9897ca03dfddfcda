"""Tests for curriculum_fetch.py with a fake WebDriver."""
import pytest
from bs4 import BeautifulSoup
from selenium.common.exceptions import TimeoutException, WebDriverException

from kosen_curriculum_export import curriculum_fetch
from kosen_curriculum_export.config import DEPARTMENTS, syllabus_url
from kosen_curriculum_export.curriculum_fetch import (
    NavigationError,
    create_driver,
    fetch_curriculum,
    fetch_page_html,
)

LOADING_SHELL = "<html><body><table><tr><td>読み込み中</td></tr></table></body></html>"


def _row(title: str, quarter: int) -> str:
    cells = ["専門", "必修", title, "", "", "2"] + [""] * 20 + ["山田 太郎"]
    cells[6 + quarter] = "2"
    return "<tr>" + "".join(f"<td>{c}</td>" for c in cells) + "</tr>"


def _page(*rows: str) -> str:
    headers = "<tr><th>h</th></tr>" * 4
    return f"<html><body><table>{headers}{''.join(rows)}</table></body></html>"


class FakeElement:
    def __init__(self, tag):
        self.tag = tag

    def find_elements(self, by, value):
        return [FakeElement(t) for t in self.tag.find_all(value)]


class FakeDriver:
    """
    Serves `pages` by URL. With `render_after`, the page shows only a
    loading shell until the DOM has been polled that many times.
    """

    def __init__(self, pages: dict, error: Exception | None = None, render_after: int = 0):
        self.pages = pages
        self.error = error
        self.render_after = render_after
        self.visited: list[str] = []
        self.timeout = None
        self.quit_called = False
        self.polls = 0
        self._url = None

    def set_page_load_timeout(self, timeout):
        self.timeout = timeout

    def get(self, url):
        if self.error:
            raise self.error
        self.visited.append(url)
        self._url = url
        self.polls = 0

    @property
    def page_source(self):
        if self.polls < self.render_after:
            return LOADING_SHELL
        return self.pages[self._url]

    def find_elements(self, by, value):
        soup = BeautifulSoup(self.page_source, "html.parser")
        self.polls += 1
        return [FakeElement(t) for t in soup.find_all(value)]

    def quit(self):
        self.quit_called = True


URL = "https://example.invalid/a"


class TestFetchPageHtml:
    def test_returns_source(self, capsys):
        page = _page(_row("国語", 0))
        driver = FakeDriver({URL: page})
        assert fetch_page_html(driver, URL, timeout=5) == page
        assert driver.timeout == 5
        assert "Fetching: https://example.invalid/a" in capsys.readouterr().out

    def test_waits_for_table_rendered_after_load(self):
        page = _page(_row("国語", 0), _row("数学", 4))
        driver = FakeDriver({URL: page}, render_after=3)
        assert fetch_page_html(driver, URL, timeout=5) == page
        assert driver.polls > 3

    def test_header_only_table_is_not_enough(self):
        driver = FakeDriver({URL: _page()})
        with pytest.raises(NavigationError, match="waiting for the curriculum table"):
            fetch_page_html(driver, URL, timeout=1)

    def test_timeout(self):
        driver = FakeDriver({}, error=TimeoutException("slow"))
        with pytest.raises(NavigationError, match="Timed out after 5s"):
            fetch_page_html(driver, URL, timeout=5)

    def test_driver_error(self):
        driver = FakeDriver({}, error=WebDriverException("net::ERR_NAME_NOT_RESOLVED"))
        with pytest.raises(NavigationError, match="ERR_NAME_NOT_RESOLVED"):
            fetch_page_html(driver, URL)


class TestCreateDriver:
    def test_start_failure_names_fetch(self, monkeypatch):
        class BrokenManager:
            def install(self):
                raise OSError("no network")

        monkeypatch.setattr(curriculum_fetch, "ChromeDriverManager", BrokenManager)
        with pytest.raises(NavigationError, match="KOSEN Web Syllabus") as exc_info:
            create_driver()
        assert "no network" in str(exc_info.value)


class TestFetchCurriculum:
    def test_split_department(self, monkeypatch):
        driver = FakeDriver({
            syllabus_url(12, 2025): _page(_row("電気回路", 0), _row("共通実験", 12)),
            syllabus_url(13, 2025): _page(_row("電子回路", 2), _row("電力工学", 16)),
        }, render_after=2)
        monkeypatch.setattr(curriculum_fetch, "create_driver", lambda headless=True: driver)

        records = fetch_curriculum(2025, DEPARTMENTS["ED"])

        assert [(r.title, r.grade) for r in records] == [("電気回路", 1), ("電力工学", 5)]
        assert records[0].lecturer == "山田　太郎"
        assert driver.visited == [syllabus_url(12, 2025), syllabus_url(13, 2025)]
        assert driver.quit_called

    def test_quit_on_error(self, monkeypatch):
        driver = FakeDriver({}, error=TimeoutException("slow"))
        monkeypatch.setattr(curriculum_fetch, "create_driver", lambda headless=True: driver)

        with pytest.raises(NavigationError):
            fetch_curriculum(2025, DEPARTMENTS["C"])
        assert driver.quit_called
