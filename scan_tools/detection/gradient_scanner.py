"""
Fallback detector: banded density scan from all four sides.

Works against an adaptive brightness threshold, so it copes with lower
contrast or textured backgrounds that defeat plain binarization.
"""

from typing import Any, Dict

import numpy as np

from scan_tools.detection.base import DetectionStrategy, scale_to_original
from scan_tools.imaging import transforms
from scan_tools.imaging.raster import RasterImage
from scan_tools.models.results import DetectionAttempt, DetectionMethod


class GradientBandScanner(DetectionStrategy):
    """Scans inward from each side for the first line dense with content."""

    method = DetectionMethod.GRADIENT_SCAN

    def __init__(self, config: Dict[str, Any] = None):
        """Initialize band scanner.

        Args:
            config: Configuration dictionary with optional keys:
                - gradient_working_size: Longer side of the working image (default: 600)
                - gradient_min_contrast: Minimum max-min brightness spread (default: 10)
                - gradient_threshold_factor: Threshold as fraction of mean brightness (default: 0.7)
                - gradient_threshold_cap: Upper bound on the threshold (default: 180)
                - gradient_sample_divisor: Samples per line ~ working width / divisor (default: 40)
                - gradient_line_fraction: Dark share a line needs to count as an edge (default: 0.2)
                - gradient_padding_ratio: Outward padding per edge (default: 0.03)
                - min_coverage: Minimum fraction of each original dimension (default: 0.05)
        """
        super().__init__(config)
        self.working_size = self.config.get('gradient_working_size', 600)
        self.min_contrast = self.config.get('gradient_min_contrast', 10)
        self.threshold_factor = self.config.get('gradient_threshold_factor', 0.7)
        self.threshold_cap = self.config.get('gradient_threshold_cap', 180)
        self.sample_divisor = self.config.get('gradient_sample_divisor', 40)
        self.line_fraction = self.config.get('gradient_line_fraction', 0.2)
        self.padding_ratio = self.config.get('gradient_padding_ratio', 0.03)

    def _detect(self, image: RasterImage) -> DetectionAttempt:
        small, ratio = transforms.downsample(image, self.working_size)
        gray = transforms.normalize_contrast(transforms.to_grayscale(small)).pixels

        low, high = int(gray.min()), int(gray.max())
        average = float(gray.mean())
        contrast = high - low
        if contrast < self.min_contrast:
            return self._fail(f"insufficient contrast ({contrast})", contrast=contrast)

        threshold = min(average * self.threshold_factor, self.threshold_cap)
        sw, sh = small.size
        step = max(1, sw // self.sample_divisor)

        content = gray < threshold
        dark_background = self._has_dark_background(content)
        if dark_background:
            content = ~content

        diagnostics = {
            'working_size': [sw, sh],
            'scale': round(ratio, 4),
            'contrast': contrast,
            'threshold': round(threshold, 1),
            'step': step,
            'dark_background': dark_background,
        }

        # Share of content samples on every row / column
        row_density = content[:, ::step].mean(axis=1)
        col_density = content[::step, :].mean(axis=0)
        rows = np.nonzero(row_density > self.line_fraction)[0]
        cols = np.nonzero(col_density > self.line_fraction)[0]
        if rows.size == 0 or cols.size == 0:
            return self._fail("no content band found", **diagnostics)

        top, bottom = int(rows[0]), int(rows[-1]) + 1
        left, right = int(cols[0]), int(cols[-1]) + 1

        pad_x = int(sw * self.padding_ratio)
        pad_y = int(sh * self.padding_ratio)
        box = (
            max(0, left - pad_x),
            max(0, top - pad_y),
            min(sw, right + pad_x),
            min(sh, bottom + pad_y),
        )

        rect = scale_to_original(box, small.size, image.size)
        if rect is None or not self._covers_minimum(rect, image.width, image.height):
            return self._fail("content band below minimum size", **diagnostics)
        return self._success(rect, **diagnostics)
