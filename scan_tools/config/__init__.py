"""
Configuration loading for scan-tools.
"""

from .manager import ConfigManager, DETECTION_DEFAULTS, ENHANCEMENT_DEFAULTS

__all__ = ['ConfigManager', 'DETECTION_DEFAULTS', 'ENHANCEMENT_DEFAULTS']
