"""Pattern-based record extraction for calendar listing pages."""

import re
from typing import List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ..config import ExtractionRules
from ..models.records import (
    ContentType,
    Course,
    ExtractionResult,
    Program,
    ProgramSubjectArea,
)
from ..processors.text_normalizer import TextNormalizer
from ..utils.logging_config import get_logger

logger = get_logger()

PARENTHESIZED = re.compile(r"\(([^()]*)\)")


class PageExtractor:
    """
    Turns calendar listing markup into typed records.

    Blocks that do not fit the expected header layout are skipped
    without error; listing pages routinely contain partial blocks.
    """

    def __init__(
        self,
        rules: Optional[ExtractionRules] = None,
        normalizer: Optional[TextNormalizer] = None,
    ):
        """
        Initialize page extractor.

        Args:
            rules: Selectors and patterns for the page layout
            normalizer: Header text normalizer
        """
        self.rules = rules or ExtractionRules()
        self.normalizer = normalizer or TextNormalizer()

    def split_header(self, text: str) -> Optional[Tuple[str, str]]:
        """
        Split header text into its first two delimited segments.

        Returns:
            (first, second) trimmed, or None if the text has fewer than
            two segments or an empty first segment
        """
        segments = text.split(self.rules.delimiter)
        if len(segments) < 2:
            return None

        first, second = segments[0].strip(), segments[1].strip()
        if not first:
            return None
        return first, second

    def parse_course_header(self, text: str) -> Optional[Course]:
        """Parse "CODE - Name" into a Course."""
        parts = self.split_header(self.normalizer.normalize(text))
        if parts is None:
            return None

        code, name = parts
        return Course(code=code, name=name)

    def has_program_category(self, text: str) -> bool:
        """True if a parenthesized group names a program category."""
        for group in PARENTHESIZED.findall(text):
            group = group.lower()
            if any(keyword in group for keyword in self.rules.program_keywords):
                return True
        return False

    def parse_program_header(self, text: str) -> Optional[Program]:
        """Parse "Name (Category) - CODE" into a Program."""
        text = self.normalizer.normalize(text)
        if not self.has_program_category(text):
            return None

        parts = self.split_header(text)
        if parts is None:
            return None

        name, code = parts
        if not code.startswith(self.rules.program_prefixes):
            return None
        return Program(code=code, name=name)

    def _extract_courses(self, soup: BeautifulSoup) -> List[Course]:
        courses = []
        for block in soup.select(self.rules.course_block):
            header = block.select_one(self.rules.course_header)
            if header is None:
                continue

            course = self.parse_course_header(header.get_text())
            if course is None:
                continue

            logger.debug(f"{course.code}: {course.name}")
            courses.append(course)
        return courses

    def _extract_programs(self, soup: BeautifulSoup) -> List[Program]:
        programs = []
        for block in soup.select(self.rules.program_block):
            header = block.select_one(self.rules.program_header)
            if header is None:
                continue

            program = self.parse_program_header(header.get_text())
            if program is None:
                continue

            logger.debug(f"{program.code}: {program.name}")
            programs.append(program)
        return programs

    def _extract_subject_areas(
        self, soup: BeautifulSoup, base_url: str
    ) -> List[ProgramSubjectArea]:
        areas = []
        for anchor in soup.select(self.rules.subject_area_anchor):
            href = anchor.get("href", "")
            if self.rules.subject_area_marker not in href:
                continue

            areas.append(
                ProgramSubjectArea(
                    name=self.normalizer.normalize(anchor.get_text()),
                    endpoint=href,
                    url=urljoin(base_url, href),
                )
            )
        return areas

    def next_page_url(self, soup: BeautifulSoup, base_url: str) -> Optional[str]:
        """Absolute URL of the pager's next link, or None on the last page."""
        anchor = soup.select_one(self.rules.next_page)
        if anchor is None:
            return None

        href = anchor.get("href", "").strip()
        if not href:
            return None
        return urljoin(base_url, href)

    def extract(
        self,
        content: str,
        content_type: ContentType,
        base_url: str,
    ) -> ExtractionResult:
        """
        Extract records and the next-page link from a page.

        Args:
            content: Page HTML
            content_type: Which record rules to apply
            base_url: URL the page was fetched from, for link resolution

        Returns:
            ExtractionResult with zero or more records
        """
        soup = BeautifulSoup(content, "lxml")

        if content_type == ContentType.COURSES:
            records = self._extract_courses(soup)
        elif content_type == ContentType.PROGRAMS:
            records = self._extract_programs(soup)
        elif content_type == ContentType.SUBJECT_AREAS:
            records = self._extract_subject_areas(soup, base_url)
        else:
            raise ValueError(f"Unknown content type: {content_type}")

        return ExtractionResult(
            records=records,
            next_page=self.next_page_url(soup, base_url),
        )
