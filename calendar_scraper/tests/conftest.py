"""Shared fixtures for calendar scraper tests."""

import pytest
import requests
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from calendar_scraper.config import (
    CalendarConfig,
    ExtractionRules,
    ProxyConfig,
    RateLimitConfig,
    ScraperConfig,
    StorageConfig,
)
from calendar_scraper.models.records import Course, Program
from calendar_scraper.scraper.rate_limiter import RateLimiter
from calendar_scraper.storage.schema import create_tables

BASE_URL = "https://artsci.calendar.utoronto.ca"


# --- Configuration Fixtures ---


@pytest.fixture
def rate_limit_config():
    """Create RateLimitConfig for fast testing (no delays)."""
    return RateLimitConfig(delay_seconds=0, jitter_seconds=0, timeout_seconds=5)


@pytest.fixture
def fast_limiter(rate_limit_config):
    """RateLimiter that never sleeps."""
    return RateLimiter(rate_limit_config)


@pytest.fixture
def mock_config(tmp_path, rate_limit_config):
    """Create a ScraperConfig with no delays, proxies or log file."""
    return ScraperConfig(
        calendar=CalendarConfig(),
        rate_limit=rate_limit_config,
        proxy=ProxyConfig(proxy_urls=[], health_check=False),
        storage=StorageConfig(
            courses_table="Courses",
            programs_table="Programs",
            persist_programs=True,
        ),
        rules=ExtractionRules(),
        log_level="DEBUG",
        log_file=tmp_path / "test.log",
    )


# --- HTTP Mocking Fixtures ---


@pytest.fixture
def mock_session(mocker):
    """Create a mock requests.Session."""
    session = mocker.MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def mock_response_factory(mocker):
    """Factory for creating mock HTTP responses."""
    def _create_response(status_code=200, text="", url=BASE_URL):
        response = mocker.MagicMock()
        response.status_code = status_code
        response.text = text
        response.url = url
        response.raise_for_status = mocker.MagicMock()
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(
                f"{status_code} Error"
            )
        return response
    return _create_response


@pytest.fixture
def routed_session(mock_session, mock_response_factory):
    """
    Mock session answering GETs from a URL -> HTML mapping.

    Unknown URLs get a 404; mapping a URL to an exception raises it.
    """
    def _build(pages):
        def _get(url, **kwargs):
            body = pages.get(url)
            if isinstance(body, Exception):
                raise body
            if body is None:
                return mock_response_factory(status_code=404, url=url)
            return mock_response_factory(text=body, url=url)

        mock_session.get.side_effect = _get
        return mock_session
    return _build


# --- Database Fixtures ---


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine with the Courses and Programs tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    yield engine
    engine.dispose()


# --- Model Fixtures ---


@pytest.fixture
def sample_courses():
    return [
        Course(code="CSC108H1", name="Introduction to Computer Programming"),
        Course(code="CSC148H1", name="Introduction to Computer Science"),
        Course(code="MAT137Y1", name="Calculus with Proofs"),
    ]


@pytest.fixture
def sample_programs():
    return [
        Program(code="ASSPE1689", name="Computer Science Specialist (Science Program)"),
        Program(code="ASMAJ1689", name="Computer Science Major (Science Program)"),
    ]


# --- HTML Fixtures ---


def course_listing_html(courses, next_href=None):
    """Render a course search results page."""
    rows = "\n".join(
        f"""
        <div class="views-row">
            <h3><div aria-label="{code} - {name}">{code} - {name}</div></h3>
            <span class="views-field">Hours: 24L</span>
        </div>
        """
        for code, name in courses
    )
    pager = ""
    if next_href:
        pager = f"""
        <ul class="pager">
            <li class="pager__item pager__item--next">
                <a href="{next_href}" rel="next">Next page</a>
            </li>
        </ul>
        """
    return f"<html><body><div class='view-content'>{rows}</div>{pager}</body></html>"


def program_listing_html(headers, next_href=None):
    """Render a subject area page with program headers."""
    rows = "\n".join(
        f'<div class="views-row"><h3>{header}</h3><p>Enrolment notes.</p></div>'
        for header in headers
    )
    pager = ""
    if next_href:
        pager = (
            '<li class="pager__item pager__item--next">'
            f'<a href="{next_href}">Next</a></li>'
        )
    return f"<html><body><article>{rows}</article><ul>{pager}</ul></body></html>"


@pytest.fixture
def sample_course_page_html():
    """First page of the course listing, with a next link."""
    return course_listing_html(
        [("CSC108H1", "Introduction to Computer Programming")],
        next_href="/search-courses?page=1",
    )


@pytest.fixture
def sample_subject_areas_html():
    """Program subject area index page."""
    return """
    <html>
    <body>
        <nav><a href="/about">About the Calendar</a></nav>
        <article>
            <div class="w3-row">
                <a href="/section/Computer-Science">Computer Science</a>
            </div>
            <div class="w3-row">
                <a href="/section/Mathematics">Mathematics</a>
            </div>
            <div class="w3-row">
                <a href="https://www.utoronto.ca/section-news">News</a>
            </div>
        </article>
    </body>
    </html>
    """
