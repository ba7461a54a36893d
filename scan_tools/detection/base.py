"""
Common plumbing for document boundary detectors.

A detector never raises: ``attempt`` turns both "nothing found" and
unexpected errors into a failed ``DetectionAttempt`` so the chain can move
on to the next method.
"""

import logging
from typing import Any, Dict, Optional, Tuple

import numpy as np

from scan_tools.imaging.raster import RasterImage
from scan_tools.models.geometry import Rectangle
from scan_tools.models.results import DetectionAttempt, DetectionMethod


class DetectionStrategy:
    """Base class for a single boundary detection method."""

    method: DetectionMethod = DetectionMethod.NONE

    def __init__(self, config: Dict[str, Any] = None):
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__module__)
        # Shared by the working-resolution detectors
        self.min_coverage = self.config.get('min_coverage', 0.05)
        self.background_ring_ratio = self.config.get('background_ring_ratio', 0.02)
        self.dark_background_fraction = self.config.get('dark_background_fraction', 0.5)

    @property
    def name(self) -> str:
        return self.method.value

    def attempt(self, image: RasterImage) -> DetectionAttempt:
        """Run the detector on ``image`` and report the outcome."""
        try:
            result = self._detect(image)
        except Exception as e:
            self.logger.warning(f"{self.name} detection raised {type(e).__name__}: {e}")
            return DetectionAttempt.failed(self.method, f"error: {e}")

        if result.succeeded:
            self.logger.debug(f"{self.name} proposed {result.rectangle}")
        else:
            self.logger.info(f"{self.name} detection failed: {result.failure.reason}")
        return result

    def _detect(self, image: RasterImage) -> DetectionAttempt:
        raise NotImplementedError

    def _success(self, rectangle: Rectangle, **diagnostics) -> DetectionAttempt:
        return DetectionAttempt.success(self.method, rectangle, **diagnostics)

    def _fail(self, reason: str, **diagnostics) -> DetectionAttempt:
        return DetectionAttempt.failed(self.method, reason, **diagnostics)

    def _has_dark_background(self, content_mask: np.ndarray) -> bool:
        """Check whether the outer ring of the frame is mostly content-coloured.

        A white page photographed on a dark desk has a dark ring; in that case
        the detectors look for light pixels instead of dark ones.
        """
        h, w = content_mask.shape
        ring_y = max(1, int(h * self.background_ring_ratio))
        ring_x = max(1, int(w * self.background_ring_ratio))
        ring = np.concatenate([
            content_mask[:ring_y, :].ravel(),
            content_mask[h - ring_y:, :].ravel(),
            content_mask[:, :ring_x].ravel(),
            content_mask[:, w - ring_x:].ravel(),
        ])
        return float(ring.mean()) > self.dark_background_fraction

    def _covers_minimum(self, rect: Rectangle, width: int, height: int) -> bool:
        return rect.width >= width * self.min_coverage and rect.height >= height * self.min_coverage


def scale_to_original(box: Tuple[int, int, int, int], working_size: Tuple[int, int],
                      original_size: Tuple[int, int]) -> Optional[Rectangle]:
    """Rescale a working-resolution ``(left, top, right, bottom)`` box.

    Coordinates are truncated towards zero. Returns None for an empty box.
    """
    left, top, right, bottom = box
    working_w, working_h = working_size
    original_w, original_h = original_size
    scale_x = original_w / working_w
    scale_y = original_h / working_h

    x = int(left * scale_x)
    y = int(top * scale_y)
    width = int((right - left) * scale_x)
    height = int((bottom - top) * scale_y)
    if width <= 0 or height <= 0:
        return None
    return Rectangle(x, y, width, height)
