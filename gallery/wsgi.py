"""
WSGI entry point, e.g. ``uwsgi --module gallery.wsgi:application``.
"""

from .cli import setup_logging
from .gallery_config import load_config
from .server import create_app

config = load_config()
logger = setup_logging(False, config.log_level)

app = application = create_app(config, logger=logger)
