"""Tests for PageExtractor."""

import pytest

from calendar_scraper.config import ExtractionRules
from calendar_scraper.models.records import (
    ContentType,
    Course,
    Program,
    ProgramSubjectArea,
)
from calendar_scraper.scraper.page_extractor import PageExtractor
from conftest import BASE_URL, course_listing_html, program_listing_html

PAGE_URL = f"{BASE_URL}/search-courses"


@pytest.fixture
def extractor():
    return PageExtractor()


class TestSplitHeader:
    """Tests for delimiter splitting."""

    @pytest.mark.parametrize("text,expected", [
        ("CSC108H1 - Introduction to Computer Programming",
         ("CSC108H1", "Introduction to Computer Programming")),
        ("  MAT137Y1  -  Calculus with Proofs  ", ("MAT137Y1", "Calculus with Proofs")),
        ("HIS101H1 - Cold War - Origins", ("HIS101H1", "Cold War")),
        ("ENG140Y1 - ", ("ENG140Y1", "")),
    ])
    def test_splits_first_two_segments(self, extractor, text, expected):
        assert extractor.split_header(text) == expected

    @pytest.mark.parametrize("text", [
        "",
        "CSC108H1",
        "CSC108H1-Introduction",
        "Computer Science (Specialist)",
        " - Orphaned name",
    ])
    def test_no_delimiter_or_empty_code_yields_none(self, extractor, text):
        assert extractor.split_header(text) is None


class TestParseCourseHeader:
    """Tests for course header parsing."""

    def test_course_from_header(self, extractor):
        course = extractor.parse_course_header(
            "CSC108H1 - Introduction to Computer Programming"
        )
        assert course == Course(code="CSC108H1", name="Introduction to Computer Programming")

    def test_course_attributes_unpopulated(self, extractor):
        course = extractor.parse_course_header("CSC148H1 - Introduction to Computer Science")
        assert course.faculty == ""
        assert course.description == ""
        assert course.prerequisites == []

    def test_non_breaking_spaces_normalized(self, extractor):
        course = extractor.parse_course_header("CSC108H1\u00a0-\u00a0Intro")
        assert course.code == "CSC108H1"
        assert course.name == "Intro"

    def test_multiline_header(self, extractor):
        course = extractor.parse_course_header("\n  CSC108H1 -\n  Intro to Programming\n")
        assert course.name == "Intro to Programming"

    def test_missing_delimiter_skipped(self, extractor):
        assert extractor.parse_course_header("Hours: 24L/12T") is None

    @pytest.mark.parametrize("text", [
        "CSC108H1 \u2013 Intro",
        "CSC108H1 \u2014 Intro",
    ])
    def test_dash_variants_are_not_the_delimiter(self, extractor, text):
        assert extractor.parse_course_header(text) is None

    def test_typographic_name_kept_whole(self, extractor):
        course = extractor.parse_course_header(
            "ENG100H1 - Women\u2019s Writing \u2014 Theory"
        )
        assert course == Course(
            code="ENG100H1", name="Women\u2019s Writing \u2014 Theory"
        )


class TestParseProgramHeader:
    """Tests for program header parsing."""

    def test_specialist_program(self, extractor):
        program = extractor.parse_program_header(
            "Computer Science (Specialist) - ASSPE1234"
        )
        assert program == Program(code="ASSPE1234", name="Computer Science (Specialist)")

    def test_unrecognized_prefix_rejected(self, extractor):
        assert extractor.parse_program_header(
            "Computer Science (Specialist) - XXSPE1234"
        ) is None

    @pytest.mark.parametrize("header,code", [
        ("Computer Science Major (Science Program) - ASMAJ1689", "ASMAJ1689"),
        ("Economics (Minor) - ASMIN1058", "ASMIN1058"),
        ("Data Science (certificate) - ASCER2345", "ASCER2345"),
        ("Focus in Artificial Intelligence (FOCUS) - ASFOC1689A", "ASFOC1689A"),
        ("English Specialist (Arts Program) - ASSPE1100", "ASSPE1100"),
    ])
    def test_keywords_and_prefixes(self, extractor, header, code):
        program = extractor.parse_program_header(header)
        assert program is not None
        assert program.code == code

    @pytest.mark.parametrize("header", [
        "Computer Science Specialist - ASSPE1689",       # keyword not parenthesized
        "Computer Science (Honours) - ASSPE1689",        # no recognized keyword
        "Computer Science (Specialist)",                  # no delimiter
        "Computer Science (Specialist) - ",               # empty code
        "ASSPE1689 - Computer Science (Specialist)",      # course order
    ])
    def test_non_programs_rejected(self, extractor, header):
        assert extractor.parse_program_header(header) is None

    def test_has_program_category_case_insensitive(self, extractor):
        assert extractor.has_program_category("History (MAJOR)")
        assert extractor.has_program_category("History (joint Specialist)")
        assert not extractor.has_program_category("History Major")


class TestExtractCourses:
    """Tests for course page extraction."""

    def test_records_and_next_page(self, extractor, sample_course_page_html):
        result = extractor.extract(sample_course_page_html, ContentType.COURSES, PAGE_URL)

        assert result.records == [
            Course(code="CSC108H1", name="Introduction to Computer Programming")
        ]
        assert result.next_page == f"{BASE_URL}/search-courses?page=1"

    def test_last_page_has_no_next(self, extractor):
        html = course_listing_html([("CSC148H1", "Introduction to Computer Science")])
        result = extractor.extract(html, ContentType.COURSES, PAGE_URL)

        assert len(result.records) == 1
        assert result.next_page is None

    def test_partial_blocks_skipped(self, extractor):
        html = """
        <html><body>
            <div class="views-row"><div aria-label="x">CSC108H1 - Intro</div></div>
            <div class="views-row"><p>No header in this block</p></div>
            <div class="views-row"><div aria-label="x">Announcement</div></div>
            <div class="views-row"><div aria-label="x">CSC148H1 - Next</div></div>
        </body></html>
        """
        result = extractor.extract(html, ContentType.COURSES, PAGE_URL)

        assert [c.code for c in result.records] == ["CSC108H1", "CSC148H1"]

    def test_inline_markup_joined_without_spaces(self, extractor):
        html = """
        <div class="views-row">
            <div aria-label="x">CSC<b>108</b>H1 - Intro to <em>Programming</em></div>
        </div>
        """
        result = extractor.extract(html, ContentType.COURSES, PAGE_URL)
        assert result.records == [Course(code="CSC108H1", name="Intro to Programming")]

    def test_next_link_resolved_against_page(self, extractor):
        html = course_listing_html([], next_href="?page=3")
        result = extractor.extract(html, ContentType.COURSES, f"{PAGE_URL}?page=2")
        assert result.next_page == f"{PAGE_URL}?page=3"

    def test_pager_without_href_ends_sequence(self, extractor):
        html = '<ul><li class="pager__item--next"><span>Next</span></li></ul>'
        result = extractor.extract(html, ContentType.COURSES, PAGE_URL)
        assert result.next_page is None

    def test_empty_page(self, extractor):
        result = extractor.extract("", ContentType.COURSES, PAGE_URL)
        assert result.records == []
        assert result.next_page is None


class TestExtractPrograms:
    """Tests for program listing extraction."""

    def test_only_valid_programs_kept(self, extractor):
        html = program_listing_html([
            "Computer Science Specialist (Science Program) - ASSPE1689",
            "Enrolment Requirements",
            "Computer Science Major (Science Program) - ASMAJ1689",
            "Program Notes (Specialist) - See below",
        ])
        result = extractor.extract(html, ContentType.PROGRAMS, f"{BASE_URL}/section/x")

        assert [p.code for p in result.records] == ["ASSPE1689", "ASMAJ1689"]
        assert result.records[0].name == "Computer Science Specialist (Science Program)"


class TestExtractSubjectAreas:
    """Tests for subject area index extraction."""

    def test_marker_links_only(self, extractor, sample_subject_areas_html):
        index_url = f"{BASE_URL}/listing-program-subject-areas"
        result = extractor.extract(
            sample_subject_areas_html, ContentType.SUBJECT_AREAS, index_url
        )

        assert result.records == [
            ProgramSubjectArea(
                name="Computer Science",
                endpoint="/section/Computer-Science",
                url=f"{BASE_URL}/section/Computer-Science",
            ),
            ProgramSubjectArea(
                name="Mathematics",
                endpoint="/section/Mathematics",
                url=f"{BASE_URL}/section/Mathematics",
            ),
        ]
        assert result.next_page is None


class TestCustomRules:
    """Tests for configurable extraction rules."""

    def test_custom_delimiter(self):
        extractor = PageExtractor(ExtractionRules(delimiter=" | "))
        assert extractor.split_header("CSC108H1 | Intro") == ("CSC108H1", "Intro")
        assert extractor.split_header("CSC108H1 - Intro") is None

    def test_unknown_content_type(self, extractor):
        with pytest.raises(ValueError):
            extractor.extract("<html></html>", "syllabus", PAGE_URL)
