# extractor/orchestrator.py
from __future__ import annotations
import asyncio
import enum
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, List, Optional, Protocol, Sequence

from finder.config import FinderSettings
from finder.core import Person, TransientFetchError
from .cache import RecordCache

logger = logging.getLogger(__name__)

# Consumer callback: receives one query's records, returns True to stop the run
OnBatch = Callable[[List[Person]], bool]


class RecordSource(Protocol):
    async def fetch(self, query: str) -> List[Person]:
        """Resolve one query or raise TransientFetchError"""


class RunState(enum.Enum):
    RUNNING = "running"
    STOPPED = "stopped"  # consumer asked to stop; no further batch is dispatched
    FINISHED = "finished"


@dataclass
class RetryState:
    """Per-run retry bookkeeping: attempts per query plus the queue of queries to retry"""
    max_tries: int
    attempts: Dict[str, int] = field(default_factory=dict)
    queue: List[str] = field(default_factory=list)

    def record_failure(self, query: str) -> bool:
        """Count a failed attempt; True if the query was queued for another try"""
        self.attempts[query] = self.attempts.get(query, 0) + 1
        if self.attempts[query] < self.max_tries:
            self.queue.append(query)
            return True
        return False

    def drain(self) -> List[str]:
        queued, self.queue = self.queue, []
        return queued


@dataclass
class FetchReport:
    queries: int
    batches: int = 0
    failures: int = 0
    dropped: List[str] = field(default_factory=list)
    state: RunState = RunState.RUNNING

    @property
    def stopped(self) -> bool:
        return self.state is RunState.STOPPED


def _chunks(items: Sequence[str], size: int) -> Deque[List[str]]:
    return deque(list(items[i:i + size]) for i in range(0, len(items), size))


class BatchFetcher:
    """
    Drives compiled queries through either a pre-loaded cache or the network.

    Network mode sends `batch_size` queries concurrently, waits for the whole
    batch to settle, then pauses `fetch_delay` seconds. Failed queries are
    retried once the original batches are exhausted, up to `max_tries` attempts.

    Usage:
        async with DirectorySource(settings) as source:
            fetcher = BatchFetcher(settings, source=source)
            report = await fetcher.run(queries, on_batch)
    """

    def __init__(
        self,
        settings: FinderSettings,
        source: Optional[RecordSource] = None,
        cache: Optional[RecordCache] = None,
    ):
        if (source is None) == (cache is None):
            raise ValueError("BatchFetcher needs exactly one of 'source' or 'cache'")
        self.settings = settings
        self.source = source
        self.cache = cache

    @property
    def mode(self) -> str:
        return "cache" if self.cache is not None else "network"

    async def run(self, queries: Sequence[str], on_batch: OnBatch) -> FetchReport:
        if self.cache is not None:
            return self._run_cache(queries, on_batch)
        return await self._run_network(queries, on_batch)

    # ==================== Cache mode ====================

    def _run_cache(self, queries: Sequence[str], on_batch: OnBatch) -> FetchReport:
        report = FetchReport(queries=len(queries))
        for query in queries:
            people = self.cache.lookup(query)
            if people and on_batch(people):
                report.state = RunState.STOPPED
                return report
        report.state = RunState.FINISHED
        return report

    # ==================== Network mode ====================

    async def _fetch_batch(self, batch: List[str]) -> List:
        return await asyncio.gather(
            *(self.source.fetch(q) for q in batch), return_exceptions=True
        )

    async def _run_network(self, queries: Sequence[str], on_batch: OnBatch) -> FetchReport:
        bs = self.settings.batch_size
        report = FetchReport(queries=len(queries))
        retry = RetryState(max_tries=self.settings.max_tries)
        batches = _chunks(queries, bs)

        while report.state is RunState.RUNNING:
            if not batches:
                if not retry.queue:
                    break
                batches = _chunks(retry.drain(), bs)
                logger.info("Retrying %d failed queries...", sum(len(b) for b in batches))

            batch = batches.popleft()
            results = await self._fetch_batch(batch)
            report.batches += 1

            failed = 0
            for query, result in zip(batch, results):
                if isinstance(result, TransientFetchError):
                    failed += 1
                    report.failures += 1
                    if not retry.record_failure(query):
                        report.dropped.append(query)
                        logger.info(
                            "Giving up on %s after %d attempts", query, retry.attempts[query]
                        )
                elif isinstance(result, BaseException):
                    raise result
                elif on_batch(result):
                    report.state = RunState.STOPPED
                    break

            logger.info(
                "Failed %d queries out of %d, retrying %d queries...",
                failed, len(batch), len(retry.queue),
            )

            if report.state is RunState.RUNNING and (batches or retry.queue):
                await asyncio.sleep(self.settings.fetch_delay)

        if report.state is RunState.RUNNING:
            report.state = RunState.FINISHED
        logger.info(
            "Fetched %d queries in %d batches (%d failures, %d dropped)%s",
            report.queries, report.batches, report.failures, len(report.dropped),
            ", stopped early" if report.stopped else "",
        )
        return report
