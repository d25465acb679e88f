"""
Pytest fixtures for gallery tests.
"""

import io
import threading
from unittest.mock import MagicMock

import pytest


class InMemoryStore:
    """Dict-backed stand-in for S3Client that records every call."""

    def __init__(self, objects=None):
        from gallery.s3_client import ProbeResult, ProbeStatus

        self._probe_result = ProbeResult
        self._probe_status = ProbeStatus
        self.objects = dict(objects or {})
        self.content_types = {}
        self.head_errors = {}
        self.download_errors = {}
        self.head_calls = []
        self.download_calls = []
        self.puts = []
        self._lock = threading.Lock()

    def head(self, key):
        with self._lock:
            self.head_calls.append(key)
            if key in self.head_errors:
                return self._probe_result(self._probe_status.ERROR, self.head_errors[key])
            if key in self.objects:
                return self._probe_result(self._probe_status.FOUND)
            return self._probe_result(self._probe_status.NOT_FOUND)

    def download_object(self, key):
        with self._lock:
            self.download_calls.append(key)
            if key in self.download_errors:
                raise self.download_errors[key]
            return self.objects[key]

    def upload_object(self, key, data, content_type='application/octet-stream'):
        with self._lock:
            self.puts.append((key, data, content_type))
            self.objects[key] = data
            self.content_types[key] = content_type

    def list_objects(self, prefix):
        from gallery.s3_client import StoreObject

        for key in sorted(self.objects):
            if key.startswith(prefix):
                yield StoreObject(key=key, size=len(self.objects[key]))


def make_jpeg(size=(800, 600), color='red', exif=None) -> bytes:
    from PIL import Image

    img = Image.new('RGB', size, color=color)
    buffer = io.BytesIO()
    if exif is not None:
        img.save(buffer, format='JPEG', exif=exif.tobytes())
    else:
        img.save(buffer, format='JPEG')
    return buffer.getvalue()


def make_png_with_large_exif(size=(400, 300), orientation=6) -> bytes:
    """PNG whose eXIf chunk is too large for a JPEG APP1 segment."""
    from PIL import Image

    exif = Image.Exif()
    exif[0x0112] = orientation
    exif[0x010E] = 'x' * 70000
    img = Image.new('RGB', size, color='blue')
    buffer = io.BytesIO()
    img.save(buffer, format='PNG', exif=exif.tobytes())
    return buffer.getvalue()


@pytest.fixture
def gallery_config(tmp_path):
    """Fixture providing a complete gallery configuration."""
    from gallery.gallery_config import GalleryConfig

    return GalleryConfig(
        endpoint='https://test-account.r2.example.com',
        bucket='test-bucket',
        access_key='test-access-key',
        secret_key='test-secret-key',
        image_base_url='https://images.example.com',
        image_dir='photos',
        max_workers=4,
        max_attempts=1,
        static_dir=str(tmp_path / 'public'),
    )


@pytest.fixture
def sample_image_bytes():
    """Fixture providing an 800x600 JPEG."""
    return make_jpeg()


@pytest.fixture
def sample_png_bytes():
    """Fixture providing a PNG with transparency."""
    from PIL import Image

    img = Image.new('RGBA', (400, 300), color=(255, 0, 0, 128))
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def exif_image_bytes():
    """Fixture providing a JPEG with exposure tags and an orientation."""
    from PIL import Image
    from PIL.TiffImagePlugin import IFDRational

    exif = Image.Exif()
    exif[0x0112] = 6
    exif[0x829D] = IFDRational(28, 10)
    exif[0x829A] = IFDRational(1, 250)
    exif[0x8827] = 400
    return make_jpeg(exif=exif)


@pytest.fixture
def camera_exif_image_bytes():
    """Fixture providing a JPEG with exposure tags in the Exif sub-IFD, as cameras write them."""
    from PIL import Image
    from PIL.TiffImagePlugin import IFDRational

    exif = Image.Exif()
    exif[0x0112] = 1
    exif_ifd = exif.get_ifd(0x8769)
    exif_ifd[0x829D] = IFDRational(28, 10)
    exif_ifd[0x829A] = IFDRational(1, 250)
    exif_ifd[0x8827] = 400
    return make_jpeg(exif=exif)


@pytest.fixture
def memory_store(sample_image_bytes):
    """Fixture providing an in-memory store with a small gallery."""
    return InMemoryStore({
        'photos/a.jpg': sample_image_bytes,
        'photos/sub/b.jpg': sample_image_bytes,
        'photos/c.txt': b'not an image',
    })


@pytest.fixture
def mock_thumb_gen():
    """Fixture providing a mocked thumbnail generator."""
    from gallery.thumbnail_generator import ThumbnailGenerator

    gen = MagicMock(spec=ThumbnailGenerator)
    gen.generate.return_value = b'thumbnail data'
    return gen


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
