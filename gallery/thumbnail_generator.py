"""
ThumbnailGenerator - Handles image resizing and preview generation.
"""

import io
import logging
import struct
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .errors import DecodeError
from .gallery_config import parse_quality


# Largest EXIF payload Pillow fits in one JPEG APP1 segment
MAX_JPEG_EXIF = 65533
TAG_ORIENTATION = 0x0112


class ThumbnailGenerator:
    """
    Generates JPEG previews from original images using Pillow.
    """

    CONTENT_TYPE = 'image/jpeg'

    def __init__(
        self,
        width: int = 200,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail generator.

        Args:
            width: Target width for previews (default: 200)
            logger: Optional logger instance
        """
        self.width = width
        self.logger = logger or logging.getLogger(__name__)

    def generate(self, image_data: bytes, quality: Optional[int] = None) -> bytes:
        """
        Generate a preview from image data.

        Args:
            image_data: Original image as bytes
            quality: JPEG quality 0-100. None or out of range uses the encoder default.

        Returns:
            Encoded JPEG bytes

        Raises:
            DecodeError: If image_data is not a readable image
        """
        try:
            img = Image.open(io.BytesIO(image_data))
            img.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
            self.logger.error(f"Error decoding image: {e}")
            raise DecodeError(f"Cannot decode image: {e}") from e

        save_kwargs = {}
        exif = self._exif_for_preview(img)
        if exif:
            save_kwargs['exif'] = exif
        # A CMYK or grayscale profile does not describe the RGB output
        icc_profile = img.info.get('icc_profile')
        if icc_profile and img.mode in ('RGB', 'RGBA'):
            save_kwargs['icc_profile'] = icc_profile

        quality = parse_quality(quality)
        if quality is not None:
            save_kwargs['quality'] = quality

        img = self._convert_color_mode(img)
        img = self._resize(img)

        output = io.BytesIO()
        try:
            img.save(output, format='JPEG', **save_kwargs)
        except (OSError, ValueError) as e:
            self.logger.error(f"Error encoding preview: {e}")
            raise DecodeError(f"Cannot encode preview: {e}") from e
        return output.getvalue()

    def _exif_for_preview(self, img: Image.Image) -> Optional[bytes]:
        """Source EXIF block, reduced to Orientation when it exceeds a JPEG APP1 segment."""
        exif = img.info.get('exif')
        if not exif or len(exif) <= MAX_JPEG_EXIF:
            return exif

        try:
            orientation = img.getexif().get(TAG_ORIENTATION)
        except (OSError, ValueError, SyntaxError, struct.error):
            orientation = None
        self.logger.debug(f"EXIF block of {len(exif)} bytes too large, keeping orientation only")
        if orientation is None:
            return None
        reduced = Image.Exif()
        reduced[TAG_ORIENTATION] = orientation
        return reduced.tobytes()

    def _resize(self, img: Image.Image) -> Image.Image:
        """Scale to the target width keeping aspect ratio. Never upscales."""
        width, height = img.size
        if width <= self.width:
            return img
        new_height = max(1, round(height * self.width / width))
        return img.resize((self.width, new_height), Image.Resampling.LANCZOS)

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert image to RGB, flattening transparency onto white."""
        if img.mode in ('RGBA', 'LA', 'P', 'PA'):
            img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.getchannel('A'))
            return background
        if img.mode != 'RGB':
            return img.convert('RGB')
        return img
