"""
ExifExtractor - Reads camera exposure settings from original images.
"""

import io
import logging
import math
import struct
from dataclasses import dataclass
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .errors import MetadataParseError


# Pointer to the Exif sub-IFD and the tags read from it
EXIF_IFD = 0x8769
TAG_EXPOSURE_TIME = 0x829A
TAG_F_NUMBER = 0x829D
TAG_ISO = 0x8827


@dataclass
class ExifRecord:
    """
    Exposure settings of an image. Missing tags are None.
    """
    f_number: Optional[float] = None
    exposure_time: Optional[float] = None
    iso: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'FNumber': self.f_number,
            'ExposureTime': self.exposure_time,
            'ISO': self.iso,
        }


def _to_float(value) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, tuple) and len(value) == 2:
        num, den = value
        if not den:
            return None
        result = float(num) / float(den)
    else:
        try:
            result = float(value)
        except (TypeError, ValueError, ZeroDivisionError):
            return None
    # Zero-denominator rationals read as NaN
    return result if math.isfinite(result) else None


def _to_int(value) -> Optional[int]:
    if isinstance(value, (tuple, list)):
        value = value[0] if value else None
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ExifExtractor:
    """Extracts FNumber, ExposureTime and ISO from image bytes."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def extract(self, image_data: bytes) -> ExifRecord:
        """
        Parse EXIF tags from image bytes.

        Raises:
            MetadataParseError: If there is no EXIF segment or it cannot be parsed
        """
        try:
            with Image.open(io.BytesIO(image_data)) as img:
                exif = img.getexif()
                if not exif:
                    raise MetadataParseError("No EXIF data found")
                # Older writers put exposure tags in IFD0
                tags = dict(exif)
                tags.update(exif.get_ifd(EXIF_IFD))
        except MetadataParseError:
            raise
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError, KeyError, TypeError, struct.error) as e:
            self.logger.debug(f"EXIF parse failed: {e}")
            raise MetadataParseError(f"Malformed EXIF data: {e}") from e

        return ExifRecord(
            f_number=_to_float(tags.get(TAG_F_NUMBER)),
            exposure_time=_to_float(tags.get(TAG_EXPOSURE_TIME)),
            iso=_to_int(tags.get(TAG_ISO)),
        )
