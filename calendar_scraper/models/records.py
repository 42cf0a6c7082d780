"""Record models harvested from the course calendar."""

from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, Field


class ContentType(str, Enum):
    """Kinds of calendar pages the extractor understands."""

    COURSES = "courses"
    SUBJECT_AREAS = "subject_areas"
    PROGRAMS = "programs"


class Course(BaseModel):
    """A course listed in the calendar, keyed by its course code."""

    code: str = Field(..., min_length=1, description="Course code, e.g. CSC108H1")
    name: str = Field(..., description="Course title")
    faculty: str = Field(default="", description="Offering faculty")
    description: str = Field(default="", description="Calendar description")
    prerequisites: List[str] = Field(
        default_factory=list, description="Prerequisite course codes"
    )

    @property
    def key(self) -> str:
        return self.code


class Program(BaseModel):
    """A specialist, major, minor, certificate or focus program."""

    code: str = Field(..., min_length=1, description="Program code, e.g. ASSPE1689")
    name: str = Field(..., description="Program display name")
    faculty: str = Field(default="", description="Offering faculty")

    @property
    def key(self) -> str:
        return self.code


class ProgramSubjectArea(BaseModel):
    """An index entry linking to the programs of one subject area."""

    name: str = Field(..., description="Subject area display name")
    endpoint: str = Field(..., description="Link as written in the index page")
    url: str = Field(..., description="Endpoint resolved to an absolute URL")


class Page(BaseModel):
    """A fetched calendar page."""

    url: str = Field(..., description="URL the page was fetched from")
    content: str = Field(..., description="Response body")
    status_code: int = Field(default=200, description="HTTP status code")


Record = Union[Course, Program, ProgramSubjectArea]


class ExtractionResult(BaseModel):
    """Records found on one page plus the link to the following page."""

    records: List[Record] = Field(default_factory=list)
    next_page: Optional[str] = Field(default=None, description="Absolute next-page URL")
