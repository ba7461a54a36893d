"""
Cheap bright-background check.

Many documents are photographed on a light table. If the top and bottom
strips of the frame are near-white we skip the expensive scans and
propose a symmetric inset crop.
"""

from typing import Any, Dict

import numpy as np

from scan_tools.detection.base import DetectionStrategy
from scan_tools.imaging import transforms
from scan_tools.imaging.raster import RasterImage
from scan_tools.models.geometry import Rectangle
from scan_tools.models.results import DetectionAttempt, DetectionMethod


class BorderClassifier(DetectionStrategy):
    """Proposes an inset crop when the frame sits on a uniform bright background."""

    method = DetectionMethod.BORDER_REMOVAL

    def __init__(self, config: Dict[str, Any] = None):
        """Initialize border classifier.

        Args:
            config: Configuration dictionary with optional keys:
                - strip_max_height: Upper bound on sampled strip height in pixels (default: 20)
                - strip_ratio: Strip height as fraction of the shorter side (default: 0.05)
                - bright_threshold: Mean brightness above which the background is bright (default: 220)
                - inset_factor: Inset per side as a multiple of the strip height (default: 0.8)
                - min_crop_size: Floor on proposed width and height (default: 100)
        """
        super().__init__(config)
        self.strip_max_height = self.config.get('strip_max_height', 20)
        self.strip_ratio = self.config.get('strip_ratio', 0.05)
        self.bright_threshold = self.config.get('bright_threshold', 220)
        self.inset_factor = self.config.get('inset_factor', 0.8)
        self.min_crop_size = self.config.get('min_crop_size', 100)

    def strip_height(self, width: int, height: int) -> int:
        return int(min(self.strip_max_height, self.strip_ratio * min(width, height)))

    def _detect(self, image: RasterImage) -> DetectionAttempt:
        w, h = image.size
        strip = self.strip_height(w, h)
        if strip < 1:
            return self._fail(f"image too small to sample ({w}x{h})")

        gray = transforms.luminance(image)
        samples = np.concatenate([gray[:strip, :].ravel(), gray[h - strip:, :].ravel()])
        brightness = float(samples.mean())

        if brightness <= self.bright_threshold:
            return self._fail(f"background not bright (mean {brightness:.1f})",
                              brightness=round(brightness, 1))

        inset = int(self.inset_factor * strip)
        rect = Rectangle(
            inset,
            inset,
            max(self.min_crop_size, w - 2 * inset),
            max(self.min_crop_size, h - 2 * inset),
        )
        return self._success(rect, brightness=round(brightness, 1), strip_height=strip, inset=inset)
