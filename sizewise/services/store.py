import time
from typing import Callable, Dict, Optional

from ..schemas.analysis import AnalysisResult


class AnalysisStore:
    """In-process TTL store of analyses keyed by product URL.

    Nothing survives a restart; long-term persistence belongs to the caller.
    """

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.time) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: Dict[str, AnalysisResult] = {}
        self._cache_exp: Dict[str, float] = {}
        self._latest: Optional[str] = None

    def get(self, url: str) -> Optional[AnalysisResult]:
        now = self._clock()
        if url in self._cache and self._cache_exp.get(url, 0) > now:
            return self._cache[url]
        if url in self._cache:
            self._cache.pop(url, None)
            self._cache_exp.pop(url, None)
        return None

    def set(self, result: AnalysisResult) -> None:
        self._cache[result.url] = result
        self._cache_exp[result.url] = self._clock() + self.ttl_seconds
        self._latest = result.url

    def latest(self) -> Optional[AnalysisResult]:
        if self._latest is None:
            return None
        return self.get(self._latest)

    def clear(self, url: Optional[str] = None) -> None:
        if url is None:
            self._cache.clear()
            self._cache_exp.clear()
        else:
            self._cache.pop(url, None)
            self._cache_exp.pop(url, None)
        self._latest = None

    def stats(self) -> Dict[str, int]:
        now = self._clock()
        return {
            "entries": len(self._cache),
            "expired": len([k for k, v in self._cache_exp.items() if v < now]),
        }
