"""Record retrieval: directory source, local cache and the batch fetcher."""
from .cache import RecordCache, load_cache
from .directory import DirectorySource, parse_people
from .orchestrator import BatchFetcher, FetchReport, RetryState, RunState

__all__ = [
    "RecordCache",
    "load_cache",
    "DirectorySource",
    "parse_people",
    "BatchFetcher",
    "FetchReport",
    "RetryState",
    "RunState",
]
