"""
Data models for the scanning pipeline.
"""

from .geometry import Rectangle
from .options import ProcessingOptions
from .results import (
    BatchItem,
    BatchResult,
    DetectionAttempt,
    DetectionFailure,
    DetectionMethod,
    DetectionResult,
    PipelineOutcome,
)

__all__ = [
    'Rectangle',
    'ProcessingOptions',
    'BatchItem',
    'BatchResult',
    'DetectionAttempt',
    'DetectionFailure',
    'DetectionMethod',
    'DetectionResult',
    'PipelineOutcome',
]
