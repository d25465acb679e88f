"""
S3Client - Object store operations for probing, downloading, uploading and listing.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Iterator, Optional

import boto3
import urllib3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from retrying import Retrying

from .errors import StoreError
from .gallery_config import GalleryConfig


NOT_FOUND_CODES = {'404', 'NoSuchKey', 'NotFound'}


class ProbeStatus(enum.Enum):
    FOUND = 'found'
    NOT_FOUND = 'not_found'
    ERROR = 'error'


@dataclass
class ProbeResult:
    """Outcome of a metadata-only existence check."""
    status: ProbeStatus
    error: Optional[StoreError] = None

    @property
    def found(self) -> bool:
        return self.status is ProbeStatus.FOUND


@dataclass
class StoreObject:
    """A single listing entry."""
    key: str
    size: int = 0
    last_modified: Optional[str] = None


def to_store_error(error: Exception, key: Optional[str] = None) -> StoreError:
    """Convert a botocore exception into a StoreError."""
    if isinstance(error, ClientError):
        err = error.response.get('Error', {})
        meta = error.response.get('ResponseMetadata', {})
        return StoreError(
            err.get('Message') or str(error),
            code=err.get('Code'),
            key=key,
            request_id=meta.get('RequestId'),
        )
    return StoreError(str(error), code=type(error).__name__, key=key)


class S3Client:
    """
    Wrapper for S3/R2 operations against a single bucket.

    head() never raises: it reports FOUND, NOT_FOUND or ERROR. The other
    operations raise StoreError. head() and download_object() are
    retried with exponential backoff; writes and listings are not.
    """

    def __init__(self, config: GalleryConfig, logger: Optional[logging.Logger] = None):
        """
        Initialize S3 client.

        Args:
            config: Gallery configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        if not config.verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        self._client = boto3.client(
            's3',
            endpoint_url=config.endpoint,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            config=Config(
                signature_version='s3v4',
                s3={'addressing_style': 'path'},
                connect_timeout=config.connect_timeout,
                read_timeout=config.read_timeout,
                retries={'mode': 'standard', 'max_attempts': 1},
            ),
            verify=config.verify_ssl
        )

    @property
    def client(self):
        """Return the underlying boto3 client."""
        return self._client

    def _retrying(self) -> Retrying:
        return Retrying(
            retry_on_exception=lambda e: isinstance(e, StoreError) and e.code not in NOT_FOUND_CODES,
            stop_max_attempt_number=self.config.max_attempts,
            wait_exponential_multiplier=1000,
            wait_exponential_max=10000,
        )

    def _head_once(self, key: str) -> ProbeStatus:
        try:
            self._client.head_object(Bucket=self.config.bucket, Key=key)
            return ProbeStatus.FOUND
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in NOT_FOUND_CODES:
                return ProbeStatus.NOT_FOUND
            self.logger.warning(f"Probe failed for {key}: {e}")
            raise to_store_error(e, key)
        except BotoCoreError as e:
            self.logger.warning(f"Probe failed for {key}: {e}")
            raise to_store_error(e, key)

    def head(self, key: str) -> ProbeResult:
        """Check whether an object exists without transferring its body."""
        try:
            status = self._retrying().call(self._head_once, key)
        except StoreError as e:
            return ProbeResult(ProbeStatus.ERROR, e)
        return ProbeResult(status)

    def _download_once(self, key: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self.config.bucket, Key=key)
            return response['Body'].read()
        except (ClientError, BotoCoreError) as e:
            self.logger.warning(f"Download failed for {key}: {e}")
            raise to_store_error(e, key)

    def download_object(self, key: str) -> bytes:
        """Download an object's full body."""
        return self._retrying().call(self._download_once, key)

    def upload_object(
        self,
        key: str,
        data: bytes,
        content_type: str = 'application/octet-stream'
    ) -> None:
        """Upload an object. Returns once the store has acknowledged the write."""
        try:
            self._client.put_object(
                Bucket=self.config.bucket,
                Key=key,
                Body=data,
                ContentType=content_type
            )
        except (ClientError, BotoCoreError) as e:
            raise to_store_error(e, key)

    def list_objects(self, prefix: str) -> Iterator[StoreObject]:
        """
        List all objects under a prefix.

        Args:
            prefix: Key prefix, e.g. 'photos/'

        Yields:
            StoreObject for each key, in store order
        """
        try:
            paginator = self._client.get_paginator('list_objects_v2')
            page_iterator = paginator.paginate(
                Bucket=self.config.bucket,
                Prefix=prefix,
            )
            for page in page_iterator:
                for obj in page.get('Contents', []):
                    last_modified = obj.get('LastModified')
                    yield StoreObject(
                        key=obj['Key'],
                        size=obj.get('Size', 0),
                        last_modified=last_modified.isoformat() if last_modified else None,
                    )
        except (ClientError, BotoCoreError) as e:
            raise to_store_error(e, prefix)
