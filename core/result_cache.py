"""On-disk memo of the last computed TripResult.

All-or-nothing: a readable, non-empty record for the key skips the whole
search. Anything else (missing, empty, unreadable, malformed) is a miss and
the result is recomputed and rewritten.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Union

from core.state import TripResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheHit:
    value: TripResult


@dataclass(frozen=True)
class CacheMiss:
    reason: str  # missing | empty | unreadable | malformed


CacheLookup = Union[CacheHit, CacheMiss]


class TripResultCache:
    def __init__(self, directory: Union[str, Path] = "."):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"cache-{key}.json"

    def lookup(self, key: str) -> CacheLookup:
        path = self.path_for(key)
        if not path.is_file():
            return CacheMiss("missing")

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.info("Cache file %s unreadable: %s", path, exc)
            return CacheMiss("unreadable")

        if not text.strip():
            return CacheMiss("empty")

        try:
            return CacheHit(TripResult.from_dict(json.loads(text)))
        except (ValueError, TypeError, KeyError) as exc:
            logger.info("Cache file %s malformed: %s", path, exc)
            return CacheMiss("malformed")

    def store(self, key: str, result: TripResult) -> Path:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(result.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        return path

    async def memoize(self, key: str, compute: Callable[[], Awaitable[TripResult]]) -> TripResult:
        """Return the cached TripResult for `key`, or await `compute` and cache its result."""
        lookup = self.lookup(key)
        if isinstance(lookup, CacheHit):
            logger.info(
                "Using cached results from %s (%d outbound, %d inbound)",
                self.path_for(key), len(lookup.value.outbound), len(lookup.value.inbound),
            )
            return lookup.value

        logger.info("Cache %s for %r, running search", lookup.reason, key)
        result = await compute()
        path = self.store(key, result)
        logger.info("Wrote %s", path)
        return result
