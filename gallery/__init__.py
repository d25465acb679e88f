"""
Image gallery backed by an S3-compatible object store.

Previews are generated lazily: the first request for an image probes
the store for its preview, and generates and uploads it when missing.
"""

__version__ = "1.0.0"

from .errors import GalleryError, ConfigurationError, StoreError, DecodeError, MetadataParseError
from .gallery_config import GalleryConfig, load_config
from .s3_client import S3Client, ProbeResult, ProbeStatus, StoreObject
from .key_namer import KeyNamer
from .thumbnail_generator import ThumbnailGenerator
from .exif_extractor import ExifExtractor, ExifRecord
from .resolver import ThumbnailResolver, Resolution
from .listing_stats import ListingStats
from .lister import GalleryLister, GalleryItem

__all__ = [
    "GalleryError",
    "ConfigurationError",
    "StoreError",
    "DecodeError",
    "MetadataParseError",
    "GalleryConfig",
    "load_config",
    "S3Client",
    "ProbeResult",
    "ProbeStatus",
    "StoreObject",
    "KeyNamer",
    "ThumbnailGenerator",
    "ExifExtractor",
    "ExifRecord",
    "ThumbnailResolver",
    "Resolution",
    "ListingStats",
    "GalleryLister",
    "GalleryItem",
]
