"""Pagination driver: walks a page sequence, folding records as it goes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Set, Tuple

from ..models.records import ContentType, ProgramSubjectArea
from ..utils.logging_config import get_logger
from ..utils.exceptions import FetchError
from .page_extractor import PageExtractor
from .page_fetcher import PageFetcher

logger = get_logger()

RecordSink = Callable[[Sequence], None]


class SequenceState(str, Enum):
    """States of one pagination sequence."""

    FETCHING = "fetching"
    EXTRACTING = "extracting"
    ADVANCING = "advancing"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class SequenceResult:
    """Outcome of a pagination sequence."""

    name: str
    state: SequenceState = SequenceState.FETCHING
    pages: int = 0
    records: int = 0
    error: Optional[str] = None
    failed_urls: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state == SequenceState.DONE


class PaginationDriver:
    """Drives the fetcher and extractor across a chain of listing pages."""

    def __init__(self, fetcher: PageFetcher, extractor: PageExtractor):
        """
        Initialize pagination driver.

        Args:
            fetcher: Rate-limited page fetcher
            extractor: Page extractor
        """
        self.fetcher = fetcher
        self.extractor = extractor

    def run(
        self,
        name: str,
        seed_url: str,
        content_type: ContentType,
        on_records: RecordSink,
    ) -> SequenceResult:
        """
        Walk one pagination sequence to completion.

        Records from page N are handed to ``on_records`` before page N+1
        is requested. A next link back to an already visited page ends the
        sequence. A fetch failure ends the sequence in ABORTED; it is
        reported in the result rather than raised.

        Args:
            name: Label used in logs and the result
            seed_url: First page of the sequence
            content_type: Extraction rules to apply
            on_records: Receives each page's records

        Returns:
            SequenceResult in DONE or ABORTED state
        """
        result = SequenceResult(name=name)
        url: Optional[str] = seed_url
        visited: Set[str] = set()

        while result.state not in (SequenceState.DONE, SequenceState.ABORTED):
            if result.state == SequenceState.FETCHING:
                try:
                    page = self.fetcher.fetch(url)
                except FetchError as e:
                    result.state = SequenceState.ABORTED
                    result.error = str(e)
                    result.failed_urls.append(e.url or url)
                    logger.error(f"[{name}] aborted on {url}: {e}")
                    break

                if page is None:
                    # Out-of-scope link: nothing more to follow
                    result.state = SequenceState.DONE
                    break

                visited.update((url, page.url))
                result.pages += 1
                result.state = SequenceState.EXTRACTING

            elif result.state == SequenceState.EXTRACTING:
                extraction = self.extractor.extract(page.content, content_type, page.url)
                if extraction.records:
                    on_records(extraction.records)
                result.records += len(extraction.records)
                result.state = SequenceState.ADVANCING

            elif result.state == SequenceState.ADVANCING:
                url = extraction.next_page
                if url in visited:
                    logger.info(f"[{name}] next link {url} already visited")
                    url = None
                result.state = SequenceState.FETCHING if url else SequenceState.DONE

        if result.succeeded:
            logger.info(
                f"[{name}] done: {result.records} records from {result.pages} pages"
            )
        return result

    def collect(
        self,
        name: str,
        seed_url: str,
        content_type: ContentType,
    ) -> Tuple[List, SequenceResult]:
        """Run a sequence and return its records in crawl order."""
        records: List = []
        result = self.run(name, seed_url, content_type, records.extend)
        return records, result

    def run_subject_areas(
        self,
        subject_areas: Sequence[ProgramSubjectArea],
        on_records: RecordSink,
        name: str = "programs",
    ) -> SequenceResult:
        """
        Harvest the program listing of every subject area.

        Each subject area is its own sequence. A failing subject area is
        recorded in ``failed_urls`` and the remaining ones still run.
        """
        outer = SequenceResult(name=name)

        for area in subject_areas:
            inner = self.run(
                f"{name}:{area.name}", area.url, ContentType.PROGRAMS, on_records
            )
            outer.pages += inner.pages
            outer.records += inner.records
            if not inner.succeeded:
                outer.failed_urls.extend(inner.failed_urls or [area.url])

        outer.state = SequenceState.DONE
        if outer.failed_urls:
            outer.error = f"{len(outer.failed_urls)} subject area(s) failed"
            logger.warning(
                f"[{name}] {len(outer.failed_urls)} of {len(subject_areas)} "
                f"subject areas failed: {', '.join(outer.failed_urls)}"
            )
        return outer
