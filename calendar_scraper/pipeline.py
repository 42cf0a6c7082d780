"""The harvest run: concurrent crawl sequences followed by one batch load."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import requests

from .config import ScraperConfig
from .models.records import ContentType
from .scraper import (
    PageExtractor,
    PageFetcher,
    PaginationDriver,
    ProxyRotator,
    RateLimiter,
    SequenceResult,
    SequenceState,
)
from .storage import HarvestStore, TransactionalLoader
from .utils.logging_config import get_logger

logger = get_logger()


@dataclass
class HarvestReport:
    """Summary of one harvest run."""

    sequences: List[SequenceResult] = field(default_factory=list)
    courses: int = 0
    programs: int = 0
    rows_written: Dict[str, int] = field(default_factory=dict)

    @property
    def failed(self) -> List[SequenceResult]:
        return [s for s in self.sequences if not s.succeeded or s.failed_urls]


class HarvestPipeline:
    """Wires the fetcher, extractor, driver and store for a single run."""

    def __init__(
        self,
        config: ScraperConfig,
        session: Optional[requests.Session] = None,
        store: Optional[HarvestStore] = None,
    ):
        """
        Initialize the pipeline.

        The rate limiter and proxy rotator built here are shared by every
        sequence of the run.

        Args:
            config: Scraper configuration
            session: requests session; a new one is created if omitted
            store: Record store; a new one is created if omitted

        Raises:
            FatalInitError: If the proxy configuration is unusable
        """
        self.config = config
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = config.calendar.user_agent

        self.rate_limiter = RateLimiter(config.rate_limit)
        self.proxy_rotator = ProxyRotator(config.proxy.proxy_urls)
        self.fetcher = PageFetcher(
            self.session,
            self.rate_limiter,
            config.calendar.allowed_domain,
            proxy_rotator=self.proxy_rotator,
            timeout=config.rate_limit.timeout_seconds,
        )
        self.extractor = PageExtractor(config.rules)
        self.driver = PaginationDriver(self.fetcher, self.extractor)
        self.store = store or HarvestStore()

    def check_proxies(self) -> None:
        """Drop unhealthy proxies; fatal if none of the configured ones work."""
        if self.proxy_rotator.enabled and self.config.proxy.health_check:
            self.proxy_rotator.check_health(
                self.session,
                self.config.calendar.base_url,
                timeout=self.config.rate_limit.timeout_seconds,
            )

    def harvest_courses(self) -> SequenceResult:
        """Walk the course search listing."""
        return self.driver.run(
            "courses",
            self.config.calendar.courses_url,
            ContentType.COURSES,
            self.store.add_courses,
        )

    def harvest_programs(self) -> SequenceResult:
        """Discover subject areas, then walk each subject area's programs."""
        subject_areas, index = self.driver.collect(
            "subject-areas",
            self.config.calendar.subject_areas_url,
            ContentType.SUBJECT_AREAS,
        )
        if not index.succeeded:
            return SequenceResult(
                name="programs",
                state=SequenceState.ABORTED,
                pages=index.pages,
                error=index.error,
                failed_urls=index.failed_urls,
            )

        logger.info(f"Found {len(subject_areas)} program subject areas")
        return self.driver.run_subject_areas(subject_areas, self.store.add_programs)

    def harvest(
        self,
        include_courses: bool = True,
        include_programs: bool = True,
    ) -> HarvestReport:
        """
        Run the selected sequences concurrently and wait for all of them.

        Returns:
            HarvestReport with one result per sequence
        """
        tasks = []
        if include_courses:
            tasks.append(self.harvest_courses)
        if include_programs:
            tasks.append(self.harvest_programs)

        report = HarvestReport()
        if tasks:
            with ThreadPoolExecutor(
                max_workers=len(tasks), thread_name_prefix="harvest"
            ) as pool:
                futures = [pool.submit(task) for task in tasks]
                report.sequences = [future.result() for future in futures]

        report.courses = len(self.store.courses)
        report.programs = len(self.store.programs)
        return report

    def flush(self, loader: TransactionalLoader) -> Dict[str, int]:
        """
        Write the store contents in a single transaction.

        Raises:
            LoadError: If any insert fails; nothing is committed
        """
        batches = {
            self.config.storage.courses_table: list(
                self.store.courses.snapshot().values()
            )
        }
        if self.config.storage.persist_programs:
            batches[self.config.storage.programs_table] = list(
                self.store.programs.snapshot().values()
            )
        return loader.load_many(batches)

    def run(
        self,
        loader: Optional[TransactionalLoader] = None,
        include_courses: bool = True,
        include_programs: bool = True,
    ) -> HarvestReport:
        """
        Harvest, then load. Without a loader the run stops after harvesting.

        Raises:
            FatalInitError: If no configured proxy is healthy
            LoadError: If the batch load fails
        """
        self.check_proxies()
        report = self.harvest(include_courses, include_programs)
        if loader is not None:
            report.rows_written = self.flush(loader)
        return report
