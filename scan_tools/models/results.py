"""
Result models produced by one pipeline run.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

from scan_tools.models.geometry import Rectangle

if TYPE_CHECKING:
    from scan_tools.imaging.raster import RasterImage


class DetectionMethod(Enum):
    """Which detector produced the final crop rectangle."""
    BORDER_REMOVAL = "border_removal"
    BOUNDING_BOX = "bounding_box"
    GRADIENT_SCAN = "gradient_scan"
    NONE = "none"


@dataclass(frozen=True)
class DetectionFailure:
    """Why a detector produced no usable rectangle."""
    method: DetectionMethod
    reason: str

    def __str__(self) -> str:
        return f"{self.method.value}: {self.reason}"


@dataclass(frozen=True)
class DetectionAttempt:
    """Outcome of one detector: either a rectangle or a failure."""
    method: DetectionMethod
    rectangle: Optional[Rectangle] = None
    failure: Optional[DetectionFailure] = None
    diagnostics: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, method: DetectionMethod, rectangle: Rectangle, **diagnostics) -> 'DetectionAttempt':
        return cls(method=method, rectangle=rectangle, diagnostics=diagnostics)

    @classmethod
    def failed(cls, method: DetectionMethod, reason: str, **diagnostics) -> 'DetectionAttempt':
        return cls(method=method, failure=DetectionFailure(method, reason), diagnostics=diagnostics)

    @property
    def succeeded(self) -> bool:
        return self.rectangle is not None


@dataclass(frozen=True)
class DetectionResult:
    """Final detection decision for one image.

    ``rectangle`` is None when no detector produced a rectangle that survived
    the bounds guard; the pipeline then uses the full frame.
    """
    rectangle: Optional[Rectangle]
    method: DetectionMethod = DetectionMethod.NONE
    attempts: Tuple[DetectionAttempt, ...] = ()

    @classmethod
    def no_crop(cls, attempts: Tuple[DetectionAttempt, ...] = ()) -> 'DetectionResult':
        return cls(rectangle=None, method=DetectionMethod.NONE, attempts=tuple(attempts))

    @property
    def crop_applied(self) -> bool:
        return self.rectangle is not None

    @property
    def failures(self) -> List[DetectionFailure]:
        return [a.failure for a in self.attempts if a.failure is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'method': self.method.value,
            'rectangle': self.rectangle.to_dict() if self.rectangle else None,
            'attempts': [
                {
                    'method': a.method.value,
                    'rectangle': a.rectangle.to_dict() if a.rectangle else None,
                    'failure': a.failure.reason if a.failure else None,
                    'diagnostics': a.diagnostics,
                }
                for a in self.attempts
            ],
        }


@dataclass(frozen=True)
class PipelineOutcome:
    """Processed image plus the diagnostics returned to the caller."""
    processed_image: 'RasterImage'
    data: bytes
    mime_type: str
    format: str
    original_size: int
    processed_size: int
    original_dimensions: Tuple[int, int]
    processed_dimensions: Tuple[int, int]
    crop_applied: bool
    crop_info: str
    compression_ratio: float
    detection: Optional[DetectionResult] = None

    @property
    def dimensions(self) -> Dict[str, Dict[str, int]]:
        ow, oh = self.original_dimensions
        pw, ph = self.processed_dimensions
        return {
            'original': {'width': ow, 'height': oh},
            'processed': {'width': pw, 'height': ph},
        }

    def to_dict(self) -> Dict[str, Any]:
        """Metadata only; the encoded bytes stay in ``data``."""
        return {
            'mimeType': self.mime_type,
            'format': self.format,
            'originalSize': self.original_size,
            'processedSize': self.processed_size,
            'dimensions': self.dimensions,
            'cropApplied': self.crop_applied,
            'cropInfo': self.crop_info,
            'compressionRatio': f"{self.compression_ratio:.1f}%",
            'detection': self.detection.to_dict() if self.detection else None,
        }


@dataclass(frozen=True)
class BatchItem:
    """Per-image entry of a batch run."""
    index: int
    success: bool
    outcome: Optional[PipelineOutcome] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'index': self.index, 'success': self.success}
        if self.success and self.outcome is not None:
            result.update(self.outcome.to_dict())
        else:
            result['error'] = self.error
        return result


@dataclass(frozen=True)
class BatchResult:
    """All items of a batch, successful or not."""
    items: Tuple[BatchItem, ...]

    @property
    def processed(self) -> int:
        return sum(1 for item in self.items if item.success)

    @property
    def failed(self) -> int:
        return sum(1 for item in self.items if not item.success)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'results': [item.to_dict() for item in self.items],
            'processed': self.processed,
            'failed': self.failed,
        }
