"""
Image enhancement applied to the cropped document.
"""

from .pipeline import EnhancementPipeline, EnhancementStep

__all__ = ['EnhancementPipeline', 'EnhancementStep']
