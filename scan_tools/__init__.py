"""
scan-tools: document boundary detection and enhancement for photographed pages.

Typical use::

    from scan_tools import DocumentProcessor, ProcessingOptions

    outcome = DocumentProcessor().process(image_bytes, ProcessingOptions(threshold=128))
"""

from .exceptions import DecodeError, EncodeError, OptionsError, ScanError
from .imaging import ImageCodec, ImageFormat, RasterImage
from .models import (
    DetectionMethod,
    DetectionResult,
    PipelineOutcome,
    ProcessingOptions,
    Rectangle,
)
from .processors import BatchProcessor, DocumentProcessor
from .presets import get_preset, list_presets

__version__ = '1.0.0'

__all__ = [
    'DecodeError',
    'EncodeError',
    'OptionsError',
    'ScanError',
    'ImageCodec',
    'ImageFormat',
    'RasterImage',
    'DetectionMethod',
    'DetectionResult',
    'PipelineOutcome',
    'ProcessingOptions',
    'Rectangle',
    'BatchProcessor',
    'DocumentProcessor',
    'get_preset',
    'list_presets',
]
