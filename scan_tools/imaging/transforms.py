"""
Pure image transforms: ``RasterImage -> RasterImage``.

None of these modify their input; each returns a new image (or the input
itself when the transform would be a no-op).
"""

from typing import Tuple

import cv2
import numpy as np

from scan_tools.imaging.raster import RasterImage
from scan_tools.models.geometry import Rectangle


def _writable(image: RasterImage) -> np.ndarray:
    # OpenCV bindings want an owned, contiguous buffer
    return np.array(image.pixels, copy=True, order='C')


def luminance(image: RasterImage) -> np.ndarray:
    """Return the image's luminance as a ``(H, W)`` uint8 array."""
    if image.is_grayscale:
        return image.pixels
    return cv2.cvtColor(_writable(image), cv2.COLOR_RGB2GRAY)


def to_grayscale(image: RasterImage) -> RasterImage:
    """Convert to single-channel luminance. Grayscale input is returned as is."""
    if image.is_grayscale:
        return image
    return image.with_pixels(luminance(image))


def resize(image: RasterImage, width: int, height: int) -> RasterImage:
    """Resize to exact dimensions using area interpolation."""
    width, height = max(1, int(width)), max(1, int(height))
    if (width, height) == image.size:
        return image
    resized = cv2.resize(_writable(image), (width, height), interpolation=cv2.INTER_AREA)
    return image.with_pixels(resized)


def resize_to_fit(image: RasterImage, max_width: int = 0, max_height: int = 0) -> RasterImage:
    """Shrink so the image fits inside ``max_width`` x ``max_height``.

    A limit of 0 means unbounded. Never upscales; aspect ratio is preserved.
    """
    scale = 1.0
    if max_width > 0 and image.width > max_width:
        scale = max_width / image.width
    if max_height > 0 and image.height * scale > max_height:
        scale = max_height / image.height
    if scale >= 1.0:
        return image
    return resize(image, round(image.width * scale), round(image.height * scale))


def downsample(image: RasterImage, max_side: int) -> Tuple[RasterImage, float]:
    """Create a working-resolution copy whose longer side is at most ``max_side``.

    Returns:
        Tuple of (working image, ratio of working to original size)
    """
    longer = max(image.width, image.height)
    if longer <= max_side:
        return image, 1.0
    ratio = max_side / longer
    small = resize(image, int(image.width * ratio), int(image.height * ratio))
    return small, ratio


def normalize_contrast(image: RasterImage, low_percentile: float = 1.0,
                       high_percentile: float = 99.0) -> RasterImage:
    """Stretch luminance so the given percentiles map to 0 and 255.

    Colour images get the same linear stretch on every channel. Images with
    no dynamic range are returned unchanged.
    """
    gray = luminance(image)
    low, high = np.percentile(gray, (low_percentile, high_percentile))
    if high - low < 1.0:
        return image
    levels = np.arange(256, dtype=np.float64)
    lut = np.clip(np.rint((levels - low) * 255.0 / (high - low)), 0, 255).astype(np.uint8)
    return image.with_pixels(lut[image.pixels])


def sharpen(image: RasterImage, sigma: float = 0.5, amount: float = 1.0) -> RasterImage:
    """Unsharp mask: ``src + amount * (src - gaussian(src, sigma))``."""
    src = _writable(image)
    blurred = cv2.GaussianBlur(src, (0, 0), sigmaX=float(sigma))
    sharpened = cv2.addWeighted(src, 1.0 + amount, blurred, -amount, 0)
    return image.with_pixels(sharpened)


def binarize(image: RasterImage, threshold: int) -> RasterImage:
    """Single-channel 0/255 image: luminance below ``threshold`` becomes black."""
    gray = luminance(image)
    return image.with_pixels(np.where(gray < threshold, 0, 255).astype(np.uint8))


def crop(image: RasterImage, rect: Rectangle) -> RasterImage:
    """Crop to ``rect``, which must lie inside the image."""
    if not rect.fits_within(image.width, image.height):
        raise ValueError(f"Crop {rect} exceeds image bounds {image.width}x{image.height}")
    if rect.is_full_frame(image.width, image.height):
        return image
    region = image.pixels[rect.y:rect.bottom, rect.x:rect.right]
    return image.with_pixels(np.ascontiguousarray(region))
