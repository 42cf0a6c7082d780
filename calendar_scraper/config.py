"""Configuration management for the calendar scraper."""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent
LOG_DIR = BASE_DIR / "logs"

CALENDAR_DOMAIN = "artsci.calendar.utoronto.ca"
CALENDAR_BASE_URL = f"https://{CALENDAR_DOMAIN}"


def _split_env_list(value: str) -> List[str]:
    """Split a comma-separated environment value, dropping blanks."""
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class CalendarConfig:
    """Seed endpoints of the course calendar."""

    base_url: str = CALENDAR_BASE_URL
    allowed_domain: str = CALENDAR_DOMAIN
    courses_url: str = f"{CALENDAR_BASE_URL}/search-courses"
    subject_areas_url: str = f"{CALENDAR_BASE_URL}/listing-program-subject-areas"
    user_agent: str = os.getenv(
        "SCRAPER_USER_AGENT",
        "Mozilla/5.0 (compatible; calendar-scraper/1.0)",
    )


@dataclass
class RateLimitConfig:
    """Rate limiting configuration."""

    delay_seconds: float = float(os.getenv("REQUEST_DELAY_SECONDS", "2"))
    jitter_seconds: float = float(os.getenv("REQUEST_JITTER_SECONDS", "0"))
    parallelism: int = 1  # in-flight requests per domain
    timeout_seconds: int = 30


@dataclass
class ProxyConfig:
    """Upstream proxies, rotated round-robin. Empty means direct connections."""

    proxy_urls: List[str] = field(
        default_factory=lambda: _split_env_list(os.getenv("PROXY_URLS", ""))
    )
    health_check: bool = os.getenv("PROXY_HEALTH_CHECK", "true").lower() == "true"


@dataclass
class DatabaseConfig:
    """Relational storage connection settings."""

    username: str = os.getenv("MySQL_USERNAME", "")
    password: str = os.getenv("MySQL_PASSWORD", "")
    database: str = os.getenv("MySQL_DB_NAME", "")
    host: str = os.getenv("MySQL_HOST", "localhost")
    driver: str = "mysql+pymysql"
    # Full SQLAlchemy URL, takes precedence over the MySQL_* settings
    url: str = os.getenv("DATABASE_URL", "")

    max_lifetime_seconds: int = 180
    max_open_connections: int = 10
    max_idle_connections: int = 10

    def connection_url(self) -> str:
        """Build the SQLAlchemy connection URL."""
        if self.url:
            return self.url
        return (
            f"{self.driver}://{self.username}:{self.password}"
            f"@{self.host}/{self.database}"
        )


@dataclass
class StorageConfig:
    """Target tables for the batch load."""

    courses_table: str = os.getenv("COURSES_TABLE", "Courses")
    programs_table: str = os.getenv("PROGRAMS_TABLE", "Programs")
    persist_programs: bool = os.getenv("PERSIST_PROGRAMS", "true").lower() == "true"


@dataclass
class ExtractionRules:
    """Selectors and patterns for the calendar page layout."""

    delimiter: str = " - "

    course_block: str = "div.views-row"
    course_header: str = "div[aria-label]"

    program_block: str = "div.views-row"
    program_header: str = "h3"

    subject_area_anchor: str = "a[href]"
    subject_area_marker: str = "/section/"

    next_page: str = "li.pager__item--next a[href]"

    program_keywords: Tuple[str, ...] = (
        "specialist",
        "major",
        "minor",
        "certificate",
        "focus",
        "science program",
        "arts program",
    )
    program_prefixes: Tuple[str, ...] = (
        "ASSPE",  # specialist
        "ASMAJ",  # major
        "ASMIN",  # minor
        "ASCER",  # certificate
        "ASFOC",  # focus
    )


@dataclass
class ScraperConfig:
    """Main scraper configuration."""

    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    proxy: ProxyConfig = field(default_factory=ProxyConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    rules: ExtractionRules = field(default_factory=ExtractionRules)

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[Path] = LOG_DIR / "scraper.log"


# Global config instance
config = ScraperConfig()
