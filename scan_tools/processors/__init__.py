"""
Pipeline orchestration for single images and batches.
"""

from .document_processor import DocumentProcessor
from .batch_processor import BatchProcessor

__all__ = ['DocumentProcessor', 'BatchProcessor']
