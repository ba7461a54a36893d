"""
Enhancement of the cropped page: resize, grayscale, normalize, sharpen,
threshold, then encode.

The order matters. Resizing first keeps the later steps cheap,
normalizing before sharpening avoids amplifying clipped values, and
thresholding discards tone so it always runs last.
"""

import logging
from functools import partial, reduce
from typing import Any, Callable, Dict, List, NamedTuple

from scan_tools.imaging import transforms
from scan_tools.imaging.raster import EncodedImage, ImageCodec, RasterImage
from scan_tools.models.options import ProcessingOptions


class EnhancementStep(NamedTuple):
    """A named pure transform."""
    name: str
    apply: Callable[[RasterImage], RasterImage]


class EnhancementPipeline:
    """Builds and runs the transform list for one set of options."""

    def __init__(self, config: Dict[str, Any] = None, codec: ImageCodec = None):
        """Initialize enhancement pipeline.

        Args:
            config: Configuration dictionary with optional keys:
                - normalize_low_percentile: Luminance percentile mapped to black (default: 1.0)
                - normalize_high_percentile: Luminance percentile mapped to white (default: 99.0)
                - sharpen_amount: Unsharp mask strength (default: 1.0)
            codec: Codec used for the final encode
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)
        self.codec = codec or ImageCodec(self.config)
        self.low_percentile = self.config.get('normalize_low_percentile', 1.0)
        self.high_percentile = self.config.get('normalize_high_percentile', 99.0)
        self.sharpen_amount = self.config.get('sharpen_amount', 1.0)

    def build_steps(self, options: ProcessingOptions) -> List[EnhancementStep]:
        steps: List[EnhancementStep] = []

        if options.max_width > 0 or options.max_height > 0:
            steps.append(EnhancementStep('resize', partial(
                transforms.resize_to_fit, max_width=options.max_width, max_height=options.max_height)))

        if options.grayscale:
            steps.append(EnhancementStep('grayscale', transforms.to_grayscale))

        if options.enhance:
            steps.append(EnhancementStep('normalize', partial(
                transforms.normalize_contrast,
                low_percentile=self.low_percentile,
                high_percentile=self.high_percentile)))
            steps.append(EnhancementStep('sharpen', partial(
                transforms.sharpen, sigma=options.sharpen_sigma, amount=self.sharpen_amount)))

        if options.binarize:
            steps.append(EnhancementStep('threshold', partial(
                transforms.binarize, threshold=options.threshold)))

        return steps

    def enhance(self, image: RasterImage, options: ProcessingOptions) -> RasterImage:
        """Apply the transforms the options ask for, without encoding."""
        steps = self.build_steps(options)
        self.logger.debug(f"Enhancement steps: {[step.name for step in steps] or 'none'}")
        return reduce(lambda current, step: step.apply(current), steps, image)

    def encode(self, image: RasterImage, options: ProcessingOptions) -> EncodedImage:
        return self.codec.encode(image, options.format, options.quality)

    def run(self, image: RasterImage, options: ProcessingOptions) -> EncodedImage:
        return self.encode(self.enhance(image, options), options)
