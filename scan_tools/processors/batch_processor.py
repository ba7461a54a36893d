"""
Sequential batch processing with per-item failure isolation.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from scan_tools.models.results import BatchItem, BatchResult
from scan_tools.processors.document_processor import DocumentProcessor, OptionsLike


class BatchProcessor:
    """Processes several images one after another.

    A failing image is recorded and the batch carries on; partial success
    is a normal result.
    """

    def __init__(self, processor: Optional[DocumentProcessor] = None,
                 max_batch_size: int = 10, config: Dict[str, Any] = None):
        self.processor = processor or DocumentProcessor(config)
        self.max_batch_size = max_batch_size
        self.logger = logging.getLogger(__name__)

    def process_batch(self, images: Sequence[bytes], options: OptionsLike = None) -> BatchResult:
        """Process every image in ``images`` with the same options.

        Raises:
            ValueError: if the batch is empty or larger than ``max_batch_size``
        """
        if not images:
            raise ValueError("At least one image is required")
        if self.max_batch_size and len(images) > self.max_batch_size:
            raise ValueError(f"Maximum {self.max_batch_size} images per batch, got {len(images)}")

        opts = self.processor.resolve_options(options)
        items: List[BatchItem] = []

        for index, data in enumerate(images):
            self.logger.info(f"Processing image {index + 1} of {len(images)}")
            try:
                outcome = self.processor.process(data, opts)
            except Exception as e:
                self.logger.error(f"Image {index + 1} failed: {e}")
                items.append(BatchItem(index=index, success=False, error=str(e)))
                continue
            items.append(BatchItem(index=index, success=True, outcome=outcome))

        result = BatchResult(tuple(items))
        self.logger.info(f"Batch complete: {result.processed} processed, {result.failed} failed")
        return result
