"""
Image gateway built on Pillow and numpy.

Wraps every imaging primitive the pipeline needs: decoding, bit depth and
size normalization, attribute access, uncompressed encoding and the
pixel-difference comparison that produces a distortion score.

Attributes are kept in ``image.info`` under gateway keys (``comment`` and
``exif:DateTimeOriginal``) so they survive conversion and resizing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from ..config import (
    COMMENT_KEY,
    CAPTURE_TIMESTAMP_KEY,
    FINGERPRINT_SIZE,
    FINGERPRINT_BIT_DEPTH,
    FINGERPRINT_FORMAT,
)
from ..exceptions import DecodeError, EncodeError
from .dependencies import Image, ExifTags, np, _logger

# TIFF ImageDescription tag
_TIFF_DESCRIPTION_TAG = 270

_ATTRIBUTE_KEYS = (COMMENT_KEY, CAPTURE_TIMESTAMP_KEY)

# Non-integer modes that convert directly to 'F'
_FLOAT_SOURCE_MODES = ('L', 'RGB', 'F')

# Integer modes ('I', 'I;16', 'I;16B', ...) carry 16-bit samples
_INTEGER_SCALE = 255 / 65535


def _rescale_integer(image: Image.Image) -> Image.Image:
    """Bring an integer mode image onto the 0-255 float scale."""
    if image.mode != 'I':
        image = image.convert('I')
    return image.convert('F').point(lambda v: v * _INTEGER_SCALE)


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode('utf-8', errors='replace')
    value = str(value).strip('\x00').strip()
    return value or None


def _read_comment(img: Image.Image) -> Optional[str]:
    # JPEG COM segments and GIF comments land in info['comment'],
    # PNG text chunks keep their own key
    comment = _as_text(img.info.get('comment') or img.info.get('Comment'))
    if comment:
        return comment
    tags = getattr(img, 'tag_v2', None)
    if tags is not None:
        return _as_text(tags.get(_TIFF_DESCRIPTION_TAG))
    return None


def _read_capture_timestamp(img: Image.Image) -> Optional[str]:
    try:
        exif = img.getexif()
    except Exception as e:
        _logger.debug(f"EXIF read failed: {e}")
        return None
    if not exif:
        return None
    value = exif.get_ifd(ExifTags.IFD.Exif).get(ExifTags.Base.DateTimeOriginal)
    if value is None:
        # Some writers put it in IFD0
        value = exif.get(ExifTags.Base.DateTimeOriginal)
    return _as_text(value)


class ImageGateway:
    """
    Decode, normalize, annotate, encode and compare single images.

    Instances hold no state and are safe to share between worker threads.
    """

    def decode(self, path: str | Path) -> Image.Image:
        """
        Read an image fully into memory.

        Args:
            path: Image file to decode

        Returns:
            A detached PIL image with ``comment`` and capture timestamp
            attributes copied into ``info`` when present

        Raises:
            DecodeError: If the file is missing, unreadable, truncated or not
                an image Pillow understands
        """
        path = str(path)
        try:
            with Image.open(path) as src:
                # Force load to detect truncated images early
                src.load()
                attributes = {}
                comment = _read_comment(src)
                if comment:
                    attributes[COMMENT_KEY] = comment
                taken = _read_capture_timestamp(src)
                if taken:
                    attributes[CAPTURE_TIMESTAMP_KEY] = taken
                image = src.copy()
        except Exception as e:
            raise DecodeError(path, e) from e

        image.info.update(attributes)
        return image

    def resize(self, image: Image.Image, size: tuple[int, int]) -> Image.Image:
        """Scale to exactly ``size`` (width, height), ignoring aspect ratio."""
        size = (int(size[0]), int(size[1]))
        if image.size == size:
            return image
        return image.resize(size, Image.Resampling.LANCZOS)

    def set_bit_depth(self, image: Image.Image, bits: int) -> Image.Image:
        """
        Convert to the pixel representation for a bit depth.

        8 bits keeps 8-bit RGB. 32 bits converts to single channel 32-bit
        float luminance, which survives TIFF round trips without
        re-quantization. Integer (16-bit) sources are rescaled onto the
        0-255 range first so they compare equal to 8-bit copies.

        Raises:
            ValueError: For any other bit depth
        """
        if bits == 8:
            if image.mode == 'RGB':
                return image
            if image.mode.startswith('I'):
                image = _rescale_integer(image)
            if image.mode == 'F':
                image = image.convert('L')
            return image.convert('RGB')

        if bits == 32:
            if image.mode == 'F':
                return image
            if image.mode.startswith('I'):
                return _rescale_integer(image)
            if image.mode not in _FLOAT_SOURCE_MODES:
                image = image.convert('RGB')
            return image.convert('F')

        raise ValueError(f"Unsupported bit depth: {bits}")

    def set_uncompressed_encoding(self, image: Image.Image) -> Image.Image:
        """Mark the image to be written without compression."""
        image.info['compression'] = 'raw'
        return image

    def normalize(
        self,
        image: Image.Image,
        size: tuple[int, int] = FINGERPRINT_SIZE,
        bits: int = FINGERPRINT_BIT_DEPTH,
    ) -> Image.Image:
        """
        Apply bit depth, size and encoding normalization in one step.

        Source metadata other than the gateway attributes (EXIF blobs, ICC
        profiles, resolution) is dropped so it is never written into a
        fingerprint.
        """
        attributes = {k: image.info[k] for k in _ATTRIBUTE_KEYS if k in image.info}
        image = self.set_bit_depth(image, bits)
        image = self.resize(image, size)
        image.info = attributes
        return self.set_uncompressed_encoding(image)

    def get_attribute(self, image: Image.Image, key: str) -> Optional[str]:
        """Return a string attribute, or None when the image does not carry it."""
        return _as_text(image.info.get(key))

    def set_attribute(self, image: Image.Image, key: str, value: str) -> None:
        image.info[key] = value

    def encode(self, image: Image.Image, path: str | Path) -> None:
        """
        Write the image; the ``comment`` attribute becomes the TIFF
        ImageDescription tag.

        Raises:
            EncodeError: If the file cannot be written
        """
        path = str(path)
        options = {
            'format': FINGERPRINT_FORMAT,
            'compression': image.info.get('compression', 'raw'),
        }
        comment = self.get_attribute(image, COMMENT_KEY)
        if comment:
            options['description'] = comment
        try:
            image.save(path, **options)
        except Exception as e:
            raise EncodeError(path, e) from e

    def to_array(self, image: Any) -> np.ndarray:
        """Return the pixels as a float32 array (numpy arrays pass through)."""
        if isinstance(image, np.ndarray):
            return image
        return np.asarray(image, dtype=np.float32)

    def compare(self, a: Any, b: Any, tolerance: float = 0) -> int:
        """
        Count pixel positions that differ by more than ``tolerance``.

        For multi-channel images a position differs when its largest
        per-channel difference exceeds the tolerance. The score ranges
        from 0 (identical) to width * height.

        Args:
            a: Image or array
            b: Image or array of the same shape
            tolerance: Fuzz factor absorbing minor pixel noise

        Raises:
            ValueError: If the two inputs do not have the same shape
        """
        left = self.to_array(a)
        right = self.to_array(b)
        if left.shape != right.shape:
            raise ValueError(f"Cannot compare shapes {left.shape} and {right.shape}")
        diff = np.abs(left - right)
        if diff.ndim == 3:
            diff = diff.max(axis=2)
        return int(np.count_nonzero(diff > tolerance))


__all__ = ['ImageGateway']
