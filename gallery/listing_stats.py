"""
ListingStats - Statistics for a gallery listing.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import List


@dataclass
class ListingStats:
    """
    Statistics for one gallery listing.

    Attributes:
        scanned: Objects returned by the store listing
        eligible: Objects that passed the extension and depth filter
        cache_hits: Previews that already existed
        generated: Previews generated during this listing
        errors: Items that failed to resolve
        bytes_generated: Total bytes of previews uploaded
        start_time: Start timestamp
        error_details: List of error messages
    """
    scanned: int = 0
    eligible: int = 0
    cache_hits: int = 0
    generated: int = 0
    errors: int = 0
    bytes_generated: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_hit(self) -> None:
        with self._lock:
            self.cache_hits += 1

    def record_generated(self, size: int) -> None:
        with self._lock:
            self.generated += 1
            self.bytes_generated += size

    def record_error(self, message: str) -> None:
        with self._lock:
            self.errors += 1
            self.error_details.append(message)

    @property
    def skipped(self) -> int:
        """Objects filtered out as ineligible."""
        return self.scanned - self.eligible

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def completed_count(self) -> int:
        """Total resolved or failed."""
        return self.cache_hits + self.generated + self.errors

    @property
    def hit_rate(self) -> float:
        """Fraction of resolved items served from cache."""
        resolved = self.cache_hits + self.generated
        if resolved:
            return self.cache_hits / resolved
        return 0.0
