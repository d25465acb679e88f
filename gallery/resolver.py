"""
ThumbnailResolver - Returns the key of a source image's preview, generating it on a cache miss.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import StoreError
from .key_namer import KeyNamer
from .s3_client import ProbeStatus
from .thumbnail_generator import ThumbnailGenerator


@dataclass
class Resolution:
    """
    Result of resolving one source key.

    Attributes:
        thumbnail_key: Key of the stored preview
        generated: True if this call generated and uploaded the preview
        size: Bytes uploaded (0 on a cache hit)
    """
    thumbnail_key: str
    generated: bool = False
    size: int = 0


class KeyedLock:
    """Per-key mutexes. Entries are dropped once no thread holds or waits on them."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, List] = {}

    @contextmanager
    def hold(self, key: str):
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class ThumbnailResolver:
    """
    Lazy preview cache on top of the object store.

    A preview is probed with HEAD; on a 404 the original is downloaded,
    resized and uploaded, and only then is the key returned. Any other
    probe failure is raised and never triggers generation.
    """

    def __init__(
        self,
        store,
        thumbnail_generator: ThumbnailGenerator,
        key_namer: KeyNamer,
        quality: Optional[int] = None,
        use_lock: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize resolver.

        Args:
            store: S3Client (or any object with head/download_object/upload_object)
            thumbnail_generator: Thumbnail generator instance
            key_namer: Maps source keys to preview keys
            quality: JPEG quality passed to the generator
            use_lock: Serialize generation of the same preview key in this process
            logger: Optional logger instance
        """
        self.store = store
        self.thumb_gen = thumbnail_generator
        self.key_namer = key_namer
        self.quality = quality
        self.logger = logger or logging.getLogger(__name__)
        self._locks = KeyedLock() if use_lock else None

    def resolve(self, source_key: str) -> str:
        """Return the preview key for source_key, generating the preview if missing."""
        return self.resolve_detailed(source_key).thumbnail_key

    def resolve_detailed(self, source_key: str) -> Resolution:
        thumb_key = self.key_namer.thumbnail_key_for(source_key)
        if self._locks is None:
            return self._resolve(source_key, thumb_key)
        with self._locks.hold(thumb_key):
            return self._resolve(source_key, thumb_key)

    def _resolve(self, source_key: str, thumb_key: str) -> Resolution:
        probe = self.store.head(thumb_key)

        if probe.status is ProbeStatus.FOUND:
            self.logger.debug(f"Cache hit: {thumb_key}")
            return Resolution(thumb_key)

        if probe.status is not ProbeStatus.NOT_FOUND:
            self.logger.error(f"Probe failed for {thumb_key}: {probe.error}")
            raise probe.error or StoreError(f"Probe failed for {thumb_key}", key=thumb_key)

        self.logger.debug(f"Cache miss, downloading: {source_key}")
        image_data = self.store.download_object(source_key)

        thumb_data = self.thumb_gen.generate(image_data, self.quality)

        self.logger.debug(f"Uploading: {thumb_key}")
        self.store.upload_object(thumb_key, thumb_data, ThumbnailGenerator.CONTENT_TYPE)

        self.logger.info(f"Generated: {thumb_key} ({len(thumb_data)} bytes) from {source_key}")
        return Resolution(thumb_key, generated=True, size=len(thumb_data))
