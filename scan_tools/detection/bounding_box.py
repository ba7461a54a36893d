"""
Primary detector: tightest bounding box around content pixels.

The image is reduced to a working resolution, binarized, and scanned for
the extent of content. The box is padded so moderately skewed pages are
still captured without corner detection.
"""

from typing import Any, Dict

import numpy as np

from scan_tools.detection.base import DetectionStrategy, scale_to_original
from scan_tools.imaging import transforms
from scan_tools.imaging.raster import RasterImage
from scan_tools.models.results import DetectionAttempt, DetectionMethod


class ContentBoundingBoxDetector(DetectionStrategy):
    """Finds the padded bounding box of all content pixels."""

    method = DetectionMethod.BOUNDING_BOX

    def __init__(self, config: Dict[str, Any] = None):
        """Initialize bounding box detector.

        Args:
            config: Configuration dictionary with optional keys:
                - bbox_working_size: Longer side of the working image (default: 800)
                - bbox_binarize_threshold: Binarization cutoff (default: 160)
                - bbox_content_cutoff: Mask values below this are content (default: 128)
                - bbox_padding_ratio: Padding as fraction of box size (default: 0.05)
                - bbox_min_padding: Minimum padding in working pixels (default: 5)
                - bbox_sharpen_sigma: Sharpening sigma before binarization (default: 1.0)
                - min_coverage: Minimum fraction of each original dimension (default: 0.05)
        """
        super().__init__(config)
        self.working_size = self.config.get('bbox_working_size', 800)
        self.binarize_threshold = self.config.get('bbox_binarize_threshold', 160)
        self.content_cutoff = self.config.get('bbox_content_cutoff', 128)
        self.padding_ratio = self.config.get('bbox_padding_ratio', 0.05)
        self.min_padding = self.config.get('bbox_min_padding', 5)
        self.sharpen_sigma = self.config.get('bbox_sharpen_sigma', 1.0)

    def _detect(self, image: RasterImage) -> DetectionAttempt:
        small, ratio = transforms.downsample(image, self.working_size)
        prepared = transforms.sharpen(
            transforms.normalize_contrast(transforms.to_grayscale(small)),
            sigma=self.sharpen_sigma,
        )
        mask = transforms.binarize(prepared, self.binarize_threshold).pixels

        content = mask < self.content_cutoff
        dark_background = self._has_dark_background(content)
        if dark_background:
            content = ~content

        ys, xs = np.nonzero(content)
        if xs.size == 0:
            return self._fail("no content pixels found", dark_background=dark_background)

        min_x, max_x = int(xs.min()), int(xs.max())
        min_y, max_y = int(ys.min()), int(ys.max())
        pad_x = max(self.min_padding, int((max_x - min_x) * self.padding_ratio))
        pad_y = max(self.min_padding, int((max_y - min_y) * self.padding_ratio))

        sw, sh = small.size
        box = (
            max(0, min_x - pad_x),
            max(0, min_y - pad_y),
            min(sw, max_x + 1 + pad_x),
            min(sh, max_y + 1 + pad_y),
        )

        diagnostics = {
            'working_size': [sw, sh],
            'scale': round(ratio, 4),
            'dark_background': dark_background,
            'content_pixels': int(xs.size),
        }
        rect = scale_to_original(box, small.size, image.size)
        if rect is None or not self._covers_minimum(rect, image.width, image.height):
            return self._fail("content region below minimum size", **diagnostics)
        return self._success(rect, **diagnostics)
