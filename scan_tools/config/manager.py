"""
Centralized configuration management for scan-tools.
"""
import os
import configparser
from typing import Dict, Any, Optional
from pathlib import Path

from scan_tools.models.options import ProcessingOptions


# Detection constants, keyed as the detector classes read them
DETECTION_DEFAULTS: Dict[str, Any] = {
    'strip_max_height': 20,
    'strip_ratio': 0.05,
    'bright_threshold': 220,
    'inset_factor': 0.8,
    'min_crop_size': 100,
    'min_coverage': 0.05,
    'background_ring_ratio': 0.02,
    'dark_background_fraction': 0.5,
    'negligible_crop_ratio': 0.95,
    'bbox_working_size': 800,
    'bbox_binarize_threshold': 160,
    'bbox_content_cutoff': 128,
    'bbox_padding_ratio': 0.05,
    'bbox_min_padding': 5,
    'bbox_sharpen_sigma': 1.0,
    'gradient_working_size': 600,
    'gradient_min_contrast': 10,
    'gradient_threshold_factor': 0.7,
    'gradient_threshold_cap': 180,
    'gradient_sample_divisor': 40,
    'gradient_line_fraction': 0.2,
    'gradient_padding_ratio': 0.03,
}

ENHANCEMENT_DEFAULTS: Dict[str, Any] = {
    'normalize_low_percentile': 1.0,
    'normalize_high_percentile': 99.0,
    'sharpen_amount': 1.0,
    'jpeg_optimize': True,
    'png_compress_level': 6,
}


class ConfigManager:
    """Centralized configuration management."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file. If None, uses default location.
        """
        self.config_file = config_file or self._get_default_config_path()
        self.config = configparser.ConfigParser()
        self._load_config()

    def _get_default_config_path(self) -> str:
        """Get default configuration file path."""
        # Look for config.conf in the repository root
        root = Path(__file__).parent.parent.parent
        return str(root / "config.conf")

    def _load_config(self):
        """Load defaults, then overlay the file if there is one."""
        self._create_default_config()
        if os.path.exists(self.config_file):
            self.config.read(self.config_file)

    def _create_default_config(self):
        """Populate default configuration in memory."""
        self.config['DETECTION'] = {k: str(v) for k, v in DETECTION_DEFAULTS.items()}
        self.config['ENHANCEMENT'] = {k: str(v) for k, v in ENHANCEMENT_DEFAULTS.items()}

        defaults = ProcessingOptions()
        self.config['PROCESSING'] = {
            'auto_crop': str(defaults.auto_crop).lower(),
            'remove_borders': str(defaults.remove_borders).lower(),
            'enhance': str(defaults.enhance).lower(),
            'grayscale': str(defaults.grayscale).lower(),
            'threshold': '',
            'max_width': str(defaults.max_width),
            'max_height': str(defaults.max_height),
            'quality': str(defaults.quality),
            'format': defaults.format,
            'sharpen_sigma': str(defaults.sharpen_sigma),
        }

        self.config['BATCH'] = {
            'max_batch_size': '10',
        }

    def get(self, section: str, key: str, fallback: Any = None) -> Any:
        """Get configuration value."""
        try:
            return self.config.get(section, key, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def get_int(self, section: str, key: str, fallback: int = 0) -> int:
        try:
            return self.config.getint(section, key, fallback=fallback)
        except ValueError:
            return fallback

    def get_float(self, section: str, key: str, fallback: float = 0.0) -> float:
        try:
            return self.config.getfloat(section, key, fallback=fallback)
        except ValueError:
            return fallback

    def get_bool(self, section: str, key: str, fallback: bool = False) -> bool:
        try:
            return self.config.getboolean(section, key, fallback=fallback)
        except ValueError:
            return fallback

    def get_section(self, section: str) -> Dict[str, str]:
        """Get entire configuration section."""
        try:
            return dict(self.config[section])
        except KeyError:
            return {}

    def set(self, section: str, key: str, value: str):
        """Set configuration value."""
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config.set(section, key, value)

    def save_config(self):
        """Save configuration to file."""
        with open(self.config_file, 'w') as f:
            self.config.write(f)

    def get_detection_config(self) -> Dict[str, Any]:
        """Typed detector, guard and enhancement settings for ``DocumentProcessor``."""
        result: Dict[str, Any] = {}
        for section, defaults in (('DETECTION', DETECTION_DEFAULTS), ('ENHANCEMENT', ENHANCEMENT_DEFAULTS)):
            for key, default in defaults.items():
                if isinstance(default, bool):
                    result[key] = self.get_bool(section, key, default)
                elif isinstance(default, int):
                    result[key] = self.get_int(section, key, default)
                else:
                    result[key] = self.get_float(section, key, default)
        return result

    def get_default_options(self) -> ProcessingOptions:
        """Default processing options from the PROCESSING section."""
        defaults = ProcessingOptions()
        threshold = self.get('PROCESSING', 'threshold', '')
        return ProcessingOptions(
            auto_crop=self.get_bool('PROCESSING', 'auto_crop', defaults.auto_crop),
            remove_borders=self.get_bool('PROCESSING', 'remove_borders', defaults.remove_borders),
            enhance=self.get_bool('PROCESSING', 'enhance', defaults.enhance),
            grayscale=self.get_bool('PROCESSING', 'grayscale', defaults.grayscale),
            threshold=int(threshold) if threshold and threshold.strip().isdigit() else None,
            max_width=self.get_int('PROCESSING', 'max_width', defaults.max_width),
            max_height=self.get_int('PROCESSING', 'max_height', defaults.max_height),
            quality=self.get_int('PROCESSING', 'quality', defaults.quality),
            format=self.get('PROCESSING', 'format', defaults.format),
            sharpen_sigma=self.get_float('PROCESSING', 'sharpen_sigma', defaults.sharpen_sigma),
        )

    def get_max_batch_size(self) -> int:
        return self.get_int('BATCH', 'max_batch_size', 10)
