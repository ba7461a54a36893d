"""
Tests for crop rectangle clamping and validation.
"""

import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from scan_tools.detection import CropBoundsGuard
from scan_tools.models import DetectionMethod, DetectionResult, Rectangle


class TestClamp:
    """Test clamping against the original frame."""

    def setup_method(self):
        self.guard = CropBoundsGuard()

    def test_inside_rectangle_unchanged(self):
        """Test a rectangle inside the frame."""
        rect = Rectangle(10, 10, 200, 200)
        assert self.guard.clamp(rect, 500, 500) == rect

    def test_overflowing_rectangle_shifted(self):
        """Test a rectangle past the right and bottom edges."""
        clamped = self.guard.clamp(Rectangle(400, 400, 300, 300), 500, 500)
        assert clamped == Rectangle(199, 199, 300, 300)

    def test_oversized_rectangle_trimmed(self):
        """Test a rectangle wider than the frame."""
        clamped = self.guard.clamp(Rectangle(50, 0, 800, 200), 500, 400)
        assert clamped == Rectangle(0, 0, 500, 200)

    def test_small_rectangles_discarded(self):
        """Test the 100px minimum side."""
        assert self.guard.clamp(Rectangle(0, 0, 100, 300), 500, 500) is None
        assert self.guard.clamp(Rectangle(0, 0, 101, 300), 500, 500) is not None

    def test_no_proposal(self):
        """Test None input."""
        assert self.guard.clamp(None, 500, 500) is None
        rect, reason = self.guard.review(None, 500, 500)
        assert rect is None
        assert reason == "no proposal"

    def test_random_rectangles_stay_in_bounds(self):
        """Test random proposals always end inside the frame."""
        rng = np.random.default_rng(42)
        for _ in range(500):
            width, height = (int(v) for v in rng.integers(1, 1500, size=2))
            x, y, w, h = (int(v) for v in rng.integers(0, 3000, size=4))
            rect = self.guard.clamp(Rectangle(x, y, w, h), width, height)
            if rect is not None:
                assert rect.x >= 0 and rect.y >= 0
                assert rect.right <= width
                assert rect.bottom <= height
                assert rect.width > 100 and rect.height > 100


class TestValidate:
    """Test rejection of crops that barely change the frame."""

    def setup_method(self):
        self.guard = CropBoundsGuard()

    def test_full_frame_is_negligible(self):
        """Test a full-frame proposal."""
        assert self.guard.validate(Rectangle.full_frame(1000, 1000), 1000, 1000) is None
        assert self.guard.clamp(Rectangle.full_frame(1000, 1000), 1000, 1000) == Rectangle(0, 0, 1000, 1000)

    def test_meaningful_crop_accepted(self):
        """Test a crop removing a real margin."""
        rect = Rectangle(100, 100, 600, 600)
        assert self.guard.validate(rect, 1000, 1000) == rect

    def test_configurable_ratio(self):
        """Test the negligible-crop ratio from config."""
        guard = CropBoundsGuard({'negligible_crop_ratio': 1.01})
        assert guard.validate(Rectangle.full_frame(1000, 1000), 1000, 1000) is not None


class TestResolve:
    """Test the final crop target."""

    def setup_method(self):
        self.guard = CropBoundsGuard()

    def test_no_detection_uses_full_frame(self):
        """Test fallback to the whole image."""
        assert self.guard.resolve(DetectionResult.no_crop(), 640, 480) == Rectangle(0, 0, 640, 480)
        assert self.guard.resolve(None, 640, 480) == Rectangle(0, 0, 640, 480)

    def test_detected_rectangle_kept(self):
        """Test a detected rectangle is used unchanged."""
        rect = Rectangle(9, 0, 631, 300)
        detection = DetectionResult(rectangle=rect, method=DetectionMethod.BOUNDING_BOX)
        assert self.guard.resolve(detection, 640, 480) == rect
