"""
KeyNamer - Derives preview keys from source keys.
"""

import posixpath

from .gallery_config import NAMING_SCHEMES


class KeyNamer:
    """
    Maps a source key to the key of its cached preview.

    'basename' places every preview directly under <image_dir>/<preview_dir>/,
    so sources with the same filename in different folders share one
    preview. 'path' keeps the source path relative to image_dir.
    """

    def __init__(self, image_dir: str = '', preview_dir: str = 'preview', naming: str = 'basename'):
        if naming not in NAMING_SCHEMES:
            raise ValueError(f"Unknown naming scheme: {naming}")
        self.image_dir = image_dir.strip('/')
        self.preview_dir = preview_dir.strip('/')
        self.naming = naming

    @property
    def preview_prefix(self) -> str:
        return posixpath.join(self.image_dir, self.preview_dir) + '/'

    def relative_key(self, source_key: str) -> str:
        """Source key relative to image_dir (unchanged if outside it)."""
        prefix = f"{self.image_dir}/" if self.image_dir else ''
        if prefix and source_key.startswith(prefix):
            return source_key[len(prefix):]
        return source_key.lstrip('/')

    def thumbnail_key_for(self, source_key: str) -> str:
        """Return the preview key for source_key."""
        if self.naming == 'path':
            name = self.relative_key(source_key)
        else:
            name = posixpath.basename(source_key)
        return self.preview_prefix + name
