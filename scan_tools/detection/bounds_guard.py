"""
Validation of proposed crop rectangles against the original frame.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from scan_tools.models.geometry import Rectangle
from scan_tools.models.results import DetectionResult


class CropBoundsGuard:
    """Clamps proposals to the image and rejects unusable ones.

    Nothing here raises: every path ends in a valid rectangle or None,
    and ``resolve`` turns None into the full frame.
    """

    def __init__(self, config: Dict[str, Any] = None):
        """Initialize bounds guard.

        Args:
            config: Configuration dictionary with optional keys:
                - min_crop_size: Rectangles with a side of this size or less are discarded (default: 100)
                - negligible_crop_ratio: Rectangles keeping at least this share of the
                  frame area are treated as no crop (default: 0.95)
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)
        self.min_crop_size = self.config.get('min_crop_size', 100)
        self.negligible_crop_ratio = self.config.get('negligible_crop_ratio', 0.95)

    def clamp(self, rect: Optional[Rectangle], width: int, height: int) -> Optional[Rectangle]:
        """Clamp ``rect`` into a ``width`` x ``height`` frame.

        Returns None when there is no rectangle or the clamped one is too small.
        """
        return self.review(rect, width, height, allow_negligible=True)[0]

    def validate(self, rect: Optional[Rectangle], width: int, height: int) -> Optional[Rectangle]:
        """Clamp ``rect`` and also reject crops that barely change the frame."""
        return self.review(rect, width, height)[0]

    def review(self, rect: Optional[Rectangle], width: int, height: int,
               allow_negligible: bool = False) -> Tuple[Optional[Rectangle], str]:
        """Clamp and check a proposal.

        Returns:
            Tuple of (validated rectangle or None, reason)
        """
        if rect is None:
            return None, "no proposal"

        x = max(0, min(rect.x, width - rect.width - 1))
        y = max(0, min(rect.y, height - rect.height - 1))
        clamped = Rectangle(
            x,
            y,
            max(0, min(rect.width, width - x)),
            max(0, min(rect.height, height - y)),
        )

        if clamped.width <= self.min_crop_size or clamped.height <= self.min_crop_size:
            reason = f"clamped crop {clamped} not larger than {self.min_crop_size}px"
            self.logger.debug(reason)
            return None, reason

        frame_area = width * height
        if not allow_negligible and frame_area > 0 and clamped.area >= self.negligible_crop_ratio * frame_area:
            reason = (f"crop {clamped} keeps {clamped.area / frame_area:.1%} of the frame; "
                      f"treated as no crop")
            self.logger.debug(reason)
            return None, reason

        return clamped, "accepted"

    def full_frame(self, width: int, height: int) -> Rectangle:
        return Rectangle.full_frame(width, height)

    def resolve(self, detection: Optional[DetectionResult], width: int, height: int) -> Rectangle:
        """Final crop target: the detected rectangle or the whole frame."""
        if detection is None or detection.rectangle is None:
            return self.full_frame(width, height)
        if detection.rectangle.fits_within(width, height):
            return detection.rectangle
        rect = self.clamp(detection.rectangle, width, height)
        return rect if rect is not None else self.full_frame(width, height)
