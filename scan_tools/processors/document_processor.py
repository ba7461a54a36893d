"""
End-to-end document processing: decode, detect, crop, enhance, encode.

The processor is stateless between calls; the same bytes and options
always produce the same output.
"""

import logging
from typing import Any, Dict, Optional, Union

from scan_tools.detection.bounds_guard import CropBoundsGuard
from scan_tools.detection.chain import DetectionChain
from scan_tools.enhancement.pipeline import EnhancementPipeline
from scan_tools.exceptions import DecodeError, EncodeError
from scan_tools.imaging import transforms
from scan_tools.imaging.raster import ImageCodec, RasterImage
from scan_tools.models.options import ProcessingOptions
from scan_tools.models.results import DetectionResult, PipelineOutcome


OptionsLike = Union[ProcessingOptions, Dict[str, Any], None]


class DocumentProcessor:
    """Runs the scanning pipeline on one image."""

    def __init__(self, config: Dict[str, Any] = None,
                 default_options: Optional[ProcessingOptions] = None):
        """Initialize document processor.

        Args:
            config: Detection/enhancement tuning, usually
                ``ConfigManager.get_detection_config()``
            default_options: Options used when a call passes none
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)
        self.default_options = default_options or ProcessingOptions()
        self.codec = ImageCodec(self.config)
        self.guard = CropBoundsGuard(self.config)
        self.enhancer = EnhancementPipeline(self.config, codec=self.codec)

    def resolve_options(self, options: OptionsLike) -> ProcessingOptions:
        if isinstance(options, ProcessingOptions):
            return options
        return ProcessingOptions.from_dict(options, defaults=self.default_options)

    def process(self, data: bytes, options: OptionsLike = None) -> PipelineOutcome:
        """Process encoded image bytes.

        Raises:
            DecodeError: if ``data`` is not a readable image
            EncodeError: if the requested output format cannot be produced
        """
        opts = self.resolve_options(options)
        try:
            image = self.codec.decode(data)
        except DecodeError as e:
            self.logger.error(f"Decode failed: {e}")
            raise
        return self.process_image(image, opts, original_size=len(data))

    def process_image(self, image: RasterImage, options: OptionsLike = None,
                      original_size: int = 0) -> PipelineOutcome:
        """Process an already decoded image."""
        opts = self.resolve_options(options)
        self.logger.info(f"Processing {image.width}x{image.height} image "
                         f"(auto_crop={opts.auto_crop}, remove_borders={opts.remove_borders})")

        detection = self.detect(image, opts)
        target = self.guard.resolve(detection, image.width, image.height)
        cropped = transforms.crop(image, target)

        enhanced = self.enhancer.enhance(cropped, opts)
        try:
            encoded = self.enhancer.encode(enhanced, opts)
        except EncodeError as e:
            self.logger.error(f"Encode failed: {e}")
            raise

        compression_ratio = 0.0
        if original_size > 0:
            compression_ratio = round((original_size - encoded.size) / original_size * 100, 1)

        outcome = PipelineOutcome(
            processed_image=enhanced,
            data=encoded.data,
            mime_type=encoded.mime_type,
            format=encoded.format.value,
            original_size=original_size,
            processed_size=encoded.size,
            original_dimensions=image.size,
            processed_dimensions=enhanced.size,
            crop_applied=detection.crop_applied,
            crop_info=self._describe_crop(detection, opts),
            compression_ratio=compression_ratio,
            detection=detection,
        )
        self.logger.info(f"Processed {image.width}x{image.height} -> "
                         f"{enhanced.width}x{enhanced.height} {encoded.format.value} "
                         f"({encoded.size} bytes); {outcome.crop_info}")
        return outcome

    def detect(self, image: RasterImage, options: OptionsLike = None) -> DetectionResult:
        """Run only the detection chain the options ask for."""
        opts = self.resolve_options(options)
        chain = DetectionChain.from_options(opts, self.config, guard=self.guard)
        return chain.detect(image)

    @staticmethod
    def _describe_crop(detection: DetectionResult, options: ProcessingOptions) -> str:
        if not options.detection_enabled:
            return "Auto-crop disabled"
        if not detection.crop_applied:
            return "No document boundary detected; using full frame"
        return f"Cropped to {detection.rectangle} via {detection.method.value}"
