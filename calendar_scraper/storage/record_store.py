"""In-memory, key-deduplicated store for harvested records."""

import threading
from typing import Dict, Generic, Iterable, List, Optional, TypeVar

from ..models.records import Course, Program

T = TypeVar("T")


class RecordStore(Generic[T]):
    """
    Records keyed by business key, safe for concurrent writers.

    Re-inserting a key replaces the previous record (last writer wins).
    """

    def __init__(self, name: str = "records"):
        self.name = name
        self._records: Dict[str, T] = {}
        self._lock = threading.Lock()

    def upsert(self, key: str, record: T) -> None:
        """Insert or replace the record stored under ``key``."""
        if not key:
            raise ValueError(f"{self.name}: record key must be non-empty")
        with self._lock:
            self._records[key] = record

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            return self._records.get(key)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._records)

    def snapshot(self) -> Dict[str, T]:
        """Copy of the current contents; later upserts do not affect it."""
        with self._lock:
            return dict(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._records


class HarvestStore:
    """Course and program stores for one run, in disjoint keyspaces."""

    def __init__(self):
        self.courses: RecordStore[Course] = RecordStore("courses")
        self.programs: RecordStore[Program] = RecordStore("programs")

    def add_courses(self, courses: Iterable[Course]) -> None:
        for course in courses:
            self.courses.upsert(course.code, course)

    def add_programs(self, programs: Iterable[Program]) -> None:
        for program in programs:
            self.programs.upsert(program.code, program)
