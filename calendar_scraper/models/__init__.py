"""Data models for harvested calendar records."""

from .records import (
    ContentType,
    Course,
    ExtractionResult,
    Page,
    Program,
    ProgramSubjectArea,
)

__all__ = [
    "ContentType",
    "Course",
    "ExtractionResult",
    "Page",
    "Program",
    "ProgramSubjectArea",
]
