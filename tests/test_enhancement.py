"""
Tests for the enhancement step list and its output.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from scan_tools.enhancement import EnhancementPipeline
from scan_tools.exceptions import EncodeError
from scan_tools.imaging import ImageFormat, RasterImage
from scan_tools.models import ProcessingOptions
from tests.image_builders import black_rectangle_on_white, blank, noise


class TestBuildSteps:
    """Test which steps run, and in which order."""

    def setup_method(self):
        self.pipeline = EnhancementPipeline()

    def names(self, **options):
        return [step.name for step in self.pipeline.build_steps(ProcessingOptions(**options))]

    def test_default_steps(self):
        """Test steps for default options."""
        assert self.names() == ['resize', 'grayscale', 'normalize', 'sharpen']

    def test_threshold_runs_last(self):
        """Test threshold is the last step."""
        assert self.names(threshold=128) == ['resize', 'grayscale', 'normalize', 'sharpen', 'threshold']

    def test_zero_threshold_disabled(self):
        """Test threshold 0 disables binarization."""
        assert 'threshold' not in self.names(threshold=0)

    def test_everything_disabled(self):
        """Test an empty step list."""
        assert self.names(grayscale=False, enhance=False, max_width=0) == []

    def test_height_limit_alone_enables_resize(self):
        """Test a height limit alone enables resizing."""
        assert self.names(max_width=0, max_height=600)[0] == 'resize'


class TestEnhance:
    """Test the transformed image."""

    def setup_method(self):
        self.pipeline = EnhancementPipeline()

    def test_no_upscaling(self):
        """Test small images are not enlarged."""
        image = RasterImage(blank(500, 300))
        result = self.pipeline.enhance(image, ProcessingOptions(max_width=2000))
        assert result.size == (500, 300)

    def test_width_limit(self):
        """Test the width limit."""
        image = RasterImage(blank(3000, 1500))
        result = self.pipeline.enhance(image, ProcessingOptions(max_width=1500))
        assert result.size == (1500, 750)

    def test_height_limit(self):
        """Test the height limit."""
        image = RasterImage(blank(1000, 2000))
        result = self.pipeline.enhance(image, ProcessingOptions(max_width=0, max_height=500))
        assert result.size == (250, 500)

    def test_grayscale_output(self):
        """Test grayscale output."""
        image = RasterImage(noise(200, 100))
        result = self.pipeline.enhance(image, ProcessingOptions())
        assert result.is_grayscale

    def test_colour_kept(self):
        """Test colour output."""
        image = RasterImage(noise(200, 100))
        result = self.pipeline.enhance(image, ProcessingOptions(grayscale=False))
        assert result.channels == 3

    def test_threshold_output_is_bilevel(self):
        """Test thresholded output is black or white."""
        image = RasterImage(noise(300, 200, seed=3))
        result = self.pipeline.enhance(image, ProcessingOptions(threshold=128, grayscale=False))
        assert result.is_grayscale
        assert set(np.unique(result.pixels)) <= {0, 255}

    def test_input_not_modified(self):
        """Test the input image is unchanged."""
        pixels = black_rectangle_on_white(300, 200, 50, 50, 120, 120)
        image = RasterImage(pixels.copy())
        self.pipeline.enhance(image, ProcessingOptions(threshold=100))
        assert np.array_equal(image.pixels, pixels)


class TestEncode:
    """Test the final encode."""

    def setup_method(self):
        self.pipeline = EnhancementPipeline()

    def test_run_encodes_requested_format(self):
        """Test encoding in the requested format."""
        encoded = self.pipeline.run(RasterImage(blank(120, 80)), ProcessingOptions(format='png'))
        assert encoded.format is ImageFormat.PNG
        assert encoded.mime_type == 'image/png'
        assert encoded.data.startswith(b'\x89PNG')

    def test_unsupported_format(self):
        """Test an unsupported output format."""
        with pytest.raises(EncodeError):
            self.pipeline.run(RasterImage(blank(120, 80)), ProcessingOptions(format='bmp'))


class TestIdempotence:
    """Converting an already grayscale image changes nothing."""

    def test_grayscale_twice(self):
        """Test grayscale conversion is idempotent."""
        pipeline = EnhancementPipeline()
        options = ProcessingOptions(enhance=False, max_width=0)
        image = RasterImage(noise(200, 150)[:, :, 0])

        once = pipeline.enhance(image, options)
        twice = pipeline.enhance(once, options)
        assert np.array_equal(once.pixels, image.pixels)
        assert np.array_equal(twice.pixels, once.pixels)
