"""
Document boundary detection: detectors, bounds guard and fallback chain.
"""

from .base import DetectionStrategy
from .border_classifier import BorderClassifier
from .bounding_box import ContentBoundingBoxDetector
from .gradient_scanner import GradientBandScanner
from .bounds_guard import CropBoundsGuard
from .chain import DetectionChain

__all__ = [
    'DetectionStrategy',
    'BorderClassifier',
    'ContentBoundingBoxDetector',
    'GradientBandScanner',
    'CropBoundsGuard',
    'DetectionChain',
]
