"""
Raster images and the codec that moves them to and from encoded bytes.

Pixels are kept as ``uint8`` numpy arrays in RGB order, either ``(H, W)``
for grayscale or ``(H, W, 3)`` for colour. Alpha is flattened onto white
at decode time since a scanned page has no meaningful transparency.
"""

import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from scan_tools.exceptions import DecodeError, EncodeError


class ImageFormat(Enum):
    """Supported encoded formats."""
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @classmethod
    def parse(cls, value: Union[str, 'ImageFormat', None]) -> 'ImageFormat':
        """Parse a format name ('jpg' is accepted for JPEG).

        Raises:
            EncodeError: if the name is not a supported output format.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.JPEG
        name = str(value).strip().lower()
        if name == 'jpg':
            name = 'jpeg'
        for fmt in cls:
            if fmt.value == name:
                return fmt
        raise EncodeError(f"Unsupported output format: {value!r}")

    @classmethod
    def from_pil(cls, pil_format: Optional[str]) -> Optional['ImageFormat']:
        if not pil_format:
            return None
        try:
            return cls.parse(pil_format)
        except EncodeError:
            return None

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"

    @property
    def pil_format(self) -> str:
        return self.value.upper()

    @property
    def extension(self) -> str:
        return 'jpg' if self is ImageFormat.JPEG else self.value


def _is_frozen(arr: np.ndarray) -> bool:
    """True when neither the array nor any array it views is writable."""
    while isinstance(arr, np.ndarray):
        if arr.flags.writeable:
            return False
        arr = arr.base
    return True


@dataclass(frozen=True, eq=False)
class RasterImage:
    """Immutable decoded image.

    Every transform returns a new ``RasterImage``; the wrapped array is
    marked read-only (and copied first when someone else could still write
    to it) so stages cannot modify each other's buffers.
    """
    pixels: np.ndarray
    source_format: Optional[ImageFormat] = None

    def __post_init__(self):
        arr = np.asarray(self.pixels)
        if arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255).astype(np.uint8)
        if arr.ndim == 3 and arr.shape[2] == 1:
            arr = arr[:, :, 0]
        if arr.ndim not in (2, 3) or (arr.ndim == 3 and arr.shape[2] != 3):
            raise ValueError(f"Unsupported pixel buffer shape: {arr.shape}")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise ValueError("Image has no pixels")
        if not _is_frozen(arr):
            # the caller may still hold a writable reference to this buffer
            arr = arr.copy()
            arr.flags.writeable = False
        object.__setattr__(self, 'pixels', arr)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else int(self.pixels.shape[2])

    @property
    def is_grayscale(self) -> bool:
        return self.channels == 1

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def with_pixels(self, pixels: np.ndarray) -> 'RasterImage':
        return RasterImage(pixels, self.source_format)

    def to_pil(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels))


@dataclass(frozen=True)
class EncodedImage:
    """Encoded bytes together with their format."""
    data: bytes
    format: ImageFormat

    @property
    def mime_type(self) -> str:
        return self.format.mime_type

    @property
    def size(self) -> int:
        return len(self.data)


class ImageCodec:
    """Decodes and encodes raster images with Pillow."""

    GRAYSCALE_MODES = ('1', 'L', 'LA', 'I', 'I;16', 'F')

    def __init__(self, config: Dict[str, Any] = None):
        """Initialize codec.

        Args:
            config: Configuration dictionary with optional keys:
                - jpeg_optimize: run the JPEG optimizer pass (default: True)
                - png_compress_level: zlib level for PNG output (default: 6)
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)
        self.jpeg_optimize = self.config.get('jpeg_optimize', True)
        self.png_compress_level = self.config.get('png_compress_level', 6)

    def decode(self, data: bytes) -> RasterImage:
        """Decode image bytes.

        Raises:
            DecodeError: if the bytes are empty or not a readable image.
        """
        if not data:
            raise DecodeError("Image data is empty")

        try:
            with Image.open(io.BytesIO(data)) as pil_image:
                pil_image.load()
                source_format = ImageFormat.from_pil(pil_image.format)
                pixels = np.asarray(self._normalize_mode(pil_image))
        except UnidentifiedImageError as e:
            raise DecodeError("Data is not a recognised image format") from e
        except Image.DecompressionBombError as e:
            raise DecodeError(f"Image is too large to decode safely: {e}") from e
        except (OSError, ValueError, SyntaxError) as e:
            raise DecodeError(f"Could not decode image: {e}") from e

        image = RasterImage(pixels, source_format)
        self.logger.debug(f"Decoded {image.width}x{image.height} "
                          f"({image.channels} channel(s), {source_format})")
        return image

    def encode(self, image: RasterImage, fmt: Union[str, ImageFormat, None] = ImageFormat.JPEG,
               quality: int = 80) -> EncodedImage:
        """Encode an image.

        Raises:
            EncodeError: if the format is unsupported or the encoder fails.
        """
        target = ImageFormat.parse(fmt)
        pil_image = image.to_pil()

        save_args: Dict[str, Any] = {}
        if target is ImageFormat.JPEG:
            save_args = {'quality': int(quality), 'optimize': bool(self.jpeg_optimize)}
        elif target is ImageFormat.PNG:
            save_args = {'compress_level': int(self.png_compress_level)}
        elif target is ImageFormat.WEBP:
            save_args = {'quality': int(quality)}

        buffer = io.BytesIO()
        try:
            pil_image.save(buffer, format=target.pil_format, **save_args)
        except (OSError, ValueError, KeyError) as e:
            raise EncodeError(f"Could not encode image as {target.value}: {e}") from e

        return EncodedImage(buffer.getvalue(), target)

    def _normalize_mode(self, pil_image: Image.Image) -> Image.Image:
        """Convert any Pillow mode to 'L' or 'RGB', flattening alpha onto white."""
        target_mode = 'L' if pil_image.mode in self.GRAYSCALE_MODES else 'RGB'

        has_alpha = pil_image.mode in ('RGBA', 'LA', 'PA') or (
            pil_image.mode == 'P' and 'transparency' in pil_image.info)
        if has_alpha:
            rgba = pil_image.convert('RGBA')
            background = Image.new('RGBA', rgba.size, (255, 255, 255, 255))
            pil_image = Image.alpha_composite(background, rgba)

        if pil_image.mode in ('I', 'I;16', 'F'):
            # scale 16-bit/float samples down to 8 bits before conversion
            arr = np.asarray(pil_image, dtype=np.float64)
            peak = arr.max() if arr.size else 0
            if peak > 255:
                arr = arr * (255.0 / peak)
            return Image.fromarray(np.clip(arr, 0, 255).astype(np.uint8))

        if pil_image.mode != target_mode:
            pil_image = pil_image.convert(target_mode)
        return pil_image
