"""Table definitions for harvested records."""

from sqlalchemy import Column, MetaData, String, Table
from sqlalchemy.engine import Engine

from ..utils.logging_config import get_logger

logger = get_logger()


def build_metadata(
    courses_table: str = "Courses",
    programs_table: str = "Programs",
) -> MetaData:
    """Describe the course and program tables under the given names."""
    metadata = MetaData()
    Table(
        courses_table,
        metadata,
        Column("code", String(32), primary_key=True),
        Column("name", String(255), nullable=False),
    )
    Table(
        programs_table,
        metadata,
        Column("code", String(32), primary_key=True),
        Column("name", String(255), nullable=False),
    )
    return metadata


def create_tables(
    engine: Engine,
    courses_table: str = "Courses",
    programs_table: str = "Programs",
) -> None:
    """Create any missing tables. Existing tables are left untouched."""
    build_metadata(courses_table, programs_table).create_all(engine)
    logger.info(f"Tables ready: {courses_table}, {programs_table}")
