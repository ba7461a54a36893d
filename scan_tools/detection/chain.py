"""
Ordered fallback chain of detection strategies.
"""

import logging
from typing import Any, Dict, List, Sequence

from scan_tools.detection.base import DetectionStrategy
from scan_tools.detection.border_classifier import BorderClassifier
from scan_tools.detection.bounding_box import ContentBoundingBoxDetector
from scan_tools.detection.bounds_guard import CropBoundsGuard
from scan_tools.detection.gradient_scanner import GradientBandScanner
from scan_tools.imaging.raster import RasterImage
from scan_tools.models.options import ProcessingOptions
from scan_tools.models.results import DetectionAttempt, DetectionResult


class DetectionChain:
    """Tries each strategy in order and keeps the first usable rectangle.

    A proposal is usable once the bounds guard accepts it; a rejected
    proposal is recorded as a failure and the next strategy runs.
    """

    def __init__(self, strategies: Sequence[DetectionStrategy], guard: CropBoundsGuard = None,
                 allow_negligible: bool = False):
        """Initialize detection chain.

        Args:
            strategies: Detectors in the order they are tried
            guard: Bounds guard reviewing every proposal
            allow_negligible: Accept crops that keep almost the whole frame.
                Used when the chain is only the border check, whose inset is
                always small on large photos.
        """
        self.strategies: List[DetectionStrategy] = list(strategies)
        self.guard = guard or CropBoundsGuard()
        self.allow_negligible = allow_negligible
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_options(cls, options: ProcessingOptions, config: Dict[str, Any] = None,
                     guard: CropBoundsGuard = None) -> 'DetectionChain':
        """Build the chain the options ask for.

        ``auto_crop`` runs all three methods; ``remove_borders`` alone only
        runs the cheap border check; neither means no detection at all.
        """
        strategies: List[DetectionStrategy] = []
        if options.detection_enabled:
            strategies.append(BorderClassifier(config))
        if options.auto_crop:
            strategies.append(ContentBoundingBoxDetector(config))
            strategies.append(GradientBandScanner(config))
        return cls(strategies, guard or CropBoundsGuard(config),
                   allow_negligible=not options.auto_crop)

    def detect(self, image: RasterImage) -> DetectionResult:
        attempts: List[DetectionAttempt] = []

        for strategy in self.strategies:
            attempt = strategy.attempt(image)
            if not attempt.succeeded:
                attempts.append(attempt)
                continue

            rect, reason = self.guard.review(attempt.rectangle, image.width, image.height,
                                             allow_negligible=self.allow_negligible)
            if rect is not None and rect.is_full_frame(image.width, image.height):
                rect, reason = None, "covers the whole frame"
            if rect is None:
                self.logger.info(f"{strategy.name} proposal {attempt.rectangle} rejected: {reason}")
                attempts.append(DetectionAttempt.failed(
                    strategy.method, f"rejected: {reason}",
                    proposed=attempt.rectangle.to_dict(), **attempt.diagnostics))
                continue

            attempts.append(DetectionAttempt.success(strategy.method, rect, **attempt.diagnostics))
            self.logger.info(f"Document boundary found by {strategy.name}: {rect}")
            return DetectionResult(rectangle=rect, method=strategy.method, attempts=tuple(attempts))

        if self.strategies:
            self.logger.info("No document boundary detected; using full frame")
        return DetectionResult.no_crop(tuple(attempts))
