"""
GalleryConfig - Configuration for the store client, thumbnails and server.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from .errors import ConfigurationError


NAMING_SCHEMES = ('basename', 'path')


def str2bool(value, default: bool = False) -> bool:
    """Convert common string spellings of a boolean; unknown values give default."""
    true_set = {'yes', 'true', 't', 'y', '1'}
    false_set = {'no', 'false', 'f', 'n', '0'}

    if isinstance(value, str):
        value = value.strip().lower()
        if value in true_set:
            return True
        if value in false_set:
            return False
    return default


def parse_quality(value) -> Optional[int]:
    """
    Parse a JPEG quality setting.

    Returns the integer when it lies in 0..100, otherwise None, which
    means "use the encoder default".
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        quality = int(str(value).strip())
    except ValueError:
        return None
    if 0 <= quality <= 100:
        return quality
    return None


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return default


@dataclass
class GalleryConfig:
    """
    Configuration for the gallery.

    Attributes:
        endpoint: S3-compatible endpoint URL
        bucket: Bucket holding originals and previews
        access_key: Access key id
        secret_key: Secret access key
        image_base_url: Public URL prefix objects are served from
        image_dir: Source directory prefix inside the bucket
        region: Signing region
        compression_quality: JPEG quality 0-100, or None for the encoder default
        thumbnail_width: Target width of generated previews
        preview_dir: Directory name for previews under image_dir
        naming: Thumbnail key scheme, 'basename' or 'path'
        generation_lock: Serialize generation of the same key within the process
        max_workers: Size of the listing worker pool
        skip_failed: Drop items that fail to resolve instead of failing the listing
        max_attempts: Attempts for idempotent store reads (head/get)
        connect_timeout: Store connect timeout in seconds
        read_timeout: Store read timeout in seconds
        verify_ssl: Verify TLS certificates of the endpoint
        host: Listen address
        server: bottle server adapter name
        port: Listen port
        static_dir: Directory with index.html and other static assets
        log_level: Logging level name
    """
    endpoint: Optional[str] = None
    bucket: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    image_base_url: Optional[str] = None
    image_dir: str = ''
    region: str = 'us-east-1'
    compression_quality: Optional[int] = None
    thumbnail_width: int = 200
    preview_dir: str = 'preview'
    naming: str = 'basename'
    generation_lock: bool = True
    max_workers: int = 8
    skip_failed: bool = False
    max_attempts: int = 3
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    verify_ssl: bool = True
    host: str = '0.0.0.0'
    server: str = 'auto'
    port: int = 3000
    static_dir: str = 'public'
    log_level: str = 'INFO'

    def __post_init__(self):
        self.image_dir = (self.image_dir or '').strip('/')

    @classmethod
    def from_env(cls) -> 'GalleryConfig':
        """Create configuration from environment variables."""
        return cls(
            endpoint=os.getenv('R2_ENDPOINT'),
            bucket=os.getenv('R2_BUCKET_NAME'),
            access_key=os.getenv('R2_ACCESS_KEY_ID'),
            secret_key=os.getenv('R2_SECRET_ACCESS_KEY'),
            image_base_url=os.getenv('R2_IMAGE_BASE_URL'),
            image_dir=os.getenv('R2_IMAGE_DIR', ''),
            region=os.getenv('R2_REGION', 'us-east-1'),
            compression_quality=parse_quality(os.getenv('IMAGE_COMPRESSION_QUALITY')),
            thumbnail_width=_int_env('THUMBNAIL_WIDTH', 200),
            naming=os.getenv('THUMBNAIL_NAMING', 'basename').strip().lower(),
            generation_lock=str2bool(os.getenv('THUMBNAIL_GENERATION_LOCK'), default=True),
            max_workers=_int_env('GALLERY_MAX_WORKERS', 8),
            skip_failed=str2bool(os.getenv('GALLERY_SKIP_FAILED'), default=False),
            max_attempts=_int_env('S3_MAX_ATTEMPTS', 3),
            connect_timeout=_float_env('S3_CONNECT_TIMEOUT', 10.0),
            read_timeout=_float_env('S3_READ_TIMEOUT', 60.0),
            verify_ssl=str2bool(os.getenv('S3_VERIFY_SSL'), default=True),
            host=os.getenv('HOST', '0.0.0.0'),
            server=os.getenv('SERVER', 'auto'),
            port=_int_env('PORT', 3000),
            static_dir=os.getenv('STATIC_DIR', 'public'),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        )

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if not self.endpoint:
            errors.append("R2_ENDPOINT is required")
        if not self.bucket:
            errors.append("R2_BUCKET_NAME is required")
        if not self.access_key:
            errors.append("R2_ACCESS_KEY_ID is required")
        if not self.secret_key:
            errors.append("R2_SECRET_ACCESS_KEY is required")
        if not self.image_base_url:
            errors.append("R2_IMAGE_BASE_URL is required")
        if self.naming not in NAMING_SCHEMES:
            errors.append(f"THUMBNAIL_NAMING must be one of {', '.join(NAMING_SCHEMES)}")
        if self.thumbnail_width < 1:
            errors.append("THUMBNAIL_WIDTH must be positive")
        if self.max_workers < 1:
            errors.append("GALLERY_MAX_WORKERS must be at least 1")
        if self.max_attempts < 1:
            errors.append("S3_MAX_ATTEMPTS must be at least 1")
        return errors

    @property
    def source_prefix(self) -> str:
        """Listing prefix for source objects, with trailing slash when set."""
        return f"{self.image_dir}/" if self.image_dir else ''


def load_config(config: Optional[GalleryConfig] = None) -> GalleryConfig:
    """
    Load configuration from the environment (unless given) and validate it.

    Raises:
        ConfigurationError: If any required setting is missing or invalid
    """
    config = config or GalleryConfig.from_env()
    errors = config.validate()
    if errors:
        raise ConfigurationError("; ".join(errors))
    return config
