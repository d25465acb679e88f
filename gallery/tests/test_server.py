"""Tests for the bottle application."""

import json
from urllib.parse import unquote
from wsgiref.util import setup_testing_defaults

import pytest

from gallery.errors import StoreError
from gallery.server import create_app


def call(app, path, method='GET'):
    """Issue a request against a WSGI app and return (status, headers, body)."""
    environ = {}
    setup_testing_defaults(environ)
    # WSGI servers hand the app a percent-decoded, latin-1 PATH_INFO
    environ['PATH_INFO'] = unquote(path, 'iso-8859-1')
    environ['REQUEST_METHOD'] = method
    captured = {}

    def start_response(status, headers, exc_info=None):
        captured['status'] = status
        captured['headers'] = dict(headers)

    body = b''.join(app(environ, start_response))
    return int(captured['status'].split()[0]), captured['headers'], body


@pytest.fixture
def static_dir(gallery_config):
    from pathlib import Path

    root = Path(gallery_config.static_dir)
    root.mkdir(parents=True)
    (root / 'index.html').write_text('<html>gallery</html>')
    (root / 'style.css').write_text('body {}')
    return root


@pytest.fixture
def app(gallery_config, memory_store, static_dir, logger):
    return create_app(gallery_config, store=memory_store, logger=logger)


class TestImages:
    """Tests for GET /images."""

    def test_listing(self, app, memory_store):
        status, headers, body = call(app, '/images')

        assert status == 200
        assert headers['Content-Type'].startswith('application/json')
        assert json.loads(body) == [{
            'original': 'https://images.example.com/photos/a.jpg',
            'thumbnail': 'https://images.example.com/photos/preview/a.jpg',
        }]
        assert 'photos/preview/a.jpg' in memory_store.objects
        assert memory_store.content_types['photos/preview/a.jpg'] == 'image/jpeg'

    def test_listing_failure(self, app, memory_store):
        memory_store.head_errors['photos/preview/a.jpg'] = StoreError('Access Denied', code='AccessDenied')

        status, _, body = call(app, '/images')

        assert status == 500
        assert json.loads(body) == {
            'error': 'Error loading images',
            'details': 'Access Denied',
            'code': 'AccessDenied',
        }


class TestExif:
    """Tests for GET /exif/<key>."""

    def test_exif(self, app, memory_store, exif_image_bytes):
        memory_store.objects['photos/camera.jpg'] = exif_image_bytes

        status, _, body = call(app, '/exif/photos/camera.jpg')

        data = json.loads(body)
        assert status == 200
        assert data['FNumber'] == pytest.approx(2.8)
        assert data['ExposureTime'] == pytest.approx(0.004)
        assert data['ISO'] == 400

    def test_exif_percent_encoded_key(self, app, memory_store, camera_exif_image_bytes):
        """Test the encodeURIComponent form sent by the landing page."""
        memory_store.objects['photos/camera x.jpg'] = camera_exif_image_bytes

        status, _, body = call(app, '/exif/photos%2Fcamera%20x.jpg')

        assert status == 200
        assert json.loads(body) == {
            'FNumber': pytest.approx(2.8),
            'ExposureTime': pytest.approx(0.004),
            'ISO': 400,
        }
        assert memory_store.download_calls == ['photos/camera x.jpg']

    def test_exif_missing_segment(self, app):
        status, headers, body = call(app, '/exif/photos/a.jpg')

        assert status == 500
        assert headers['Content-Type'].startswith('text/plain')
        assert body == b'Error getting EXIF data'

    def test_exif_store_error(self, app, memory_store):
        memory_store.download_errors['photos/gone.jpg'] = StoreError('Not Found', code='NoSuchKey')

        status, _, body = call(app, '/exif/photos/gone.jpg')

        assert status == 500
        assert body == b'Error getting EXIF data'


class TestConfigAndStatic:
    """Tests for /config and static routes."""

    def test_config(self, app):
        status, _, body = call(app, '/config')

        assert status == 200
        assert json.loads(body) == {'IMAGE_BASE_URL': 'https://images.example.com'}

    def test_index(self, app):
        status, headers, body = call(app, '/')

        assert status == 200
        assert body == b'<html>gallery</html>'
        assert headers['Cache-Control'] == 'public, max-age=3600'

    def test_static_file(self, app):
        status, _, body = call(app, '/style.css')

        assert status == 200
        assert body == b'body {}'

    def test_spa_fallback(self, app):
        status, _, body = call(app, '/albums/summer')

        assert status == 200
        assert body == b'<html>gallery</html>'
