"""
Raster image handling: decode/encode and pure pixel transforms.
"""

from .raster import EncodedImage, ImageCodec, ImageFormat, RasterImage
from . import transforms

__all__ = ['EncodedImage', 'ImageCodec', 'ImageFormat', 'RasterImage', 'transforms']
