"""
HTTP interface: landing page, gallery listing, EXIF lookup and static files.
"""

import json
import logging
import os
from typing import Optional

from bottle import Bottle, HTTPError, request, response, static_file

from .exif_extractor import ExifExtractor
from .gallery_config import GalleryConfig
from .key_namer import KeyNamer
from .lister import GalleryLister
from .resolver import ThumbnailResolver
from .s3_client import S3Client
from .thumbnail_generator import ThumbnailGenerator


STATIC_MAX_AGE = 3600


def build_components(config: GalleryConfig, store=None, logger: Optional[logging.Logger] = None):
    """Wire store, resolver, lister and extractor for one configuration."""
    logger = logger or logging.getLogger(__name__)
    store = store or S3Client(config, logger)
    key_namer = KeyNamer(config.image_dir, config.preview_dir, config.naming)
    resolver = ThumbnailResolver(
        store=store,
        thumbnail_generator=ThumbnailGenerator(config.thumbnail_width, logger=logger),
        key_namer=key_namer,
        quality=config.compression_quality,
        use_lock=config.generation_lock,
        logger=logger,
    )
    lister = GalleryLister(store, resolver, config, logger=logger)
    return store, resolver, lister, ExifExtractor(logger=logger)


def _json(data) -> str:
    response.content_type = 'application/json'
    return json.dumps(data)


def create_app(config: GalleryConfig, store=None, logger: Optional[logging.Logger] = None) -> Bottle:
    """
    Create the bottle application.

    Args:
        config: Gallery configuration
        store: Optional store client; an S3Client is built from config if omitted
        logger: Optional logger instance
    """
    logger = logger or logging.getLogger(__name__)
    store, resolver, lister, extractor = build_components(config, store, logger)
    static_root = os.path.abspath(config.static_dir)

    app = Bottle()

    def serve_static(filename):
        resp = static_file(filename, root=static_root)
        if resp.status_code < 400:
            resp.set_header('Cache-Control', f"public, max-age={STATIC_MAX_AGE}")
        return resp

    @app.route('/')
    def index():
        return serve_static('index.html')

    @app.route('/images')
    def images():
        try:
            items = lister.list_gallery()
        except Exception as e:
            logger.exception(f"Error loading images: {e}")
            response.status = 500
            return _json({
                'error': 'Error loading images',
                'details': getattr(e, 'message', str(e)),
                'code': getattr(e, 'code', type(e).__name__),
            })
        return _json([item.to_dict() for item in items])

    @app.route('/exif/<key:path>')
    def exif(key):
        try:
            image_data = store.download_object(key)
            record = extractor.extract(image_data)
        except Exception as e:
            logger.exception(f"Error getting EXIF data for {key}: {e}")
            response.status = 500
            response.content_type = 'text/plain; charset=utf-8'
            return 'Error getting EXIF data'
        return _json(record.to_dict())

    @app.route('/config')
    def public_config():
        return _json({'IMAGE_BASE_URL': config.image_base_url})

    @app.route('/<filepath:path>')
    def fallback(filepath):
        resp = serve_static(filepath)
        if isinstance(resp, HTTPError):
            logger.debug(f"No static file for /{filepath}, serving index")
            return serve_static('index.html')
        return resp

    @app.error(500)
    def server_error(error):
        logger.error(f"Unhandled error on {request.method} {request.path}: {error.exception}")
        response.content_type = 'application/json'
        return json.dumps({
            'error': 'Internal Server Error',
            'message': str(error.exception or error.body),
        })

    return app


def run_server(config: GalleryConfig, logger: Optional[logging.Logger] = None) -> None:
    """Run the application with bottle's built-in runner."""
    from bottle import run

    logger = logger or logging.getLogger(__name__)
    app = create_app(config, logger=logger)
    logger.info(f"Server is running on http://{config.host}:{config.port}")
    run(app=app, host=config.host, port=config.port, server=config.server, quiet=True)
