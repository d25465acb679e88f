"""
GalleryLister - Lists source images with their preview URLs.
"""

import logging
import posixpath
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from typing import List, Optional, Tuple
from urllib.parse import quote

from .gallery_config import GalleryConfig
from .listing_stats import ListingStats
from .resolver import ThumbnailResolver
from .s3_client import StoreObject


VALID_IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif'}


@dataclass
class GalleryItem:
    original: str
    thumbnail: str

    def to_dict(self) -> dict:
        return asdict(self)


def build_url(base_url: str, key: str) -> str:
    """Join the public base URL and an object key."""
    return f"{base_url.rstrip('/')}/{quote(key, safe='/')}"


class GalleryLister:
    """
    Builds the gallery listing.

    Only objects directly inside the image directory with an allowed
    extension are listed; nested folders (including the preview folder)
    are excluded. Each item is resolved through the ThumbnailResolver on
    a bounded thread pool, and the listing returns once all are done.
    """

    def __init__(
        self,
        store,
        resolver: ThumbnailResolver,
        config: GalleryConfig,
        logger: Optional[logging.Logger] = None
    ):
        self.store = store
        self.resolver = resolver
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.last_stats: Optional[ListingStats] = None

    def is_eligible(self, key: str) -> bool:
        """True for keys with an image extension exactly one level below image_dir."""
        prefix = self.config.source_prefix
        if not key.startswith(prefix):
            return False
        relative = key[len(prefix):]
        if not relative or '/' in relative:
            return False
        ext = posixpath.splitext(relative)[1].lower()
        return ext in VALID_IMAGE_EXTENSIONS

    def eligible_objects(self, stats: Optional[ListingStats] = None) -> List[StoreObject]:
        objects = []
        for obj in self.store.list_objects(self.config.source_prefix):
            if stats is not None:
                stats.scanned += 1
            if self.is_eligible(obj.key):
                objects.append(obj)
        if stats is not None:
            stats.eligible = len(objects)
        return objects

    def list_gallery(self) -> List[GalleryItem]:
        """
        Resolve every eligible image and return its URL pair.

        Raises:
            GalleryError: The first failure in listing order, unless
                skip_failed is set, in which case failed items of any kind
                are left out
        """
        stats = ListingStats()
        self.last_stats = stats

        self.logger.info(f"Listing objects in bucket {self.config.bucket} with prefix '{self.config.source_prefix}'")
        objects = self.eligible_objects(stats)
        self.logger.info(f"Found {stats.scanned} objects, {stats.eligible} eligible images")

        if not objects:
            return []

        workers = min(self.config.max_workers, len(objects))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='gallery') as executor:
            results = list(executor.map(lambda obj: self._resolve_item(obj, stats), objects))

        items = []
        for obj, (item, error) in zip(objects, results):
            if error is None:
                items.append(item)
                continue
            if not self.config.skip_failed:
                raise error
            self.logger.error(f"Skipping {obj.key}: {error}")

        self.logger.info(
            f"Returning {len(items)} of {stats.completed_count} image URLs: {stats.cache_hits} cached, "
            f"{stats.generated} generated, {stats.errors} errors "
            f"({stats.elapsed_seconds:.1f}s)"
        )
        return items

    def _resolve_item(
        self,
        obj: StoreObject,
        stats: ListingStats
    ) -> Tuple[Optional[GalleryItem], Optional[Exception]]:
        try:
            resolution = self.resolver.resolve_detailed(obj.key)
        except Exception as e:
            stats.record_error(f"{obj.key}: {e}")
            return None, e

        if resolution.generated:
            stats.record_generated(resolution.size)
        else:
            stats.record_hit()

        base_url = self.config.image_base_url or ''
        item = GalleryItem(
            original=build_url(base_url, obj.key),
            thumbnail=build_url(base_url, resolution.thumbnail_key),
        )
        return item, None
