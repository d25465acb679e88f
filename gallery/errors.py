"""
Error types raised by the gallery components.

A missing object is not an error: the store client reports it as a
probe status (see s3_client.ProbeStatus) and the resolver handles it.
"""

from typing import Optional


class GalleryError(Exception):
    """Base class for gallery failures surfaced to the HTTP layer."""

    code = 'GalleryError'

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {'code': self.code, 'message': self.message}


class ConfigurationError(GalleryError):
    """Raised when configuration is invalid or missing."""
    code = 'ConfigurationError'


class StoreError(GalleryError):
    """
    Any object store failure other than a 404 probe.

    Attributes:
        key: Object key the failing call targeted
        request_id: S3 request id, when the store returned one
    """
    code = 'StoreError'

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        key: Optional[str] = None,
        request_id: Optional[str] = None
    ):
        super().__init__(message, code)
        self.key = key
        self.request_id = request_id


class DecodeError(GalleryError):
    """Raised when image bytes cannot be decoded."""
    code = 'DecodeError'


class MetadataParseError(GalleryError):
    """Raised when an image has no EXIF segment or the segment is malformed."""
    code = 'MetadataParseError'
