"""
Named option presets for common document types.
"""
from typing import Any, Dict, List

from scan_tools.models.options import ProcessingOptions


PRESETS: Dict[str, Dict[str, Any]] = {
    # Enhancement only, the page is already framed
    'enhance': {
        'auto_crop': False, 'grayscale': True, 'enhance': True,
        'max_width': 2000, 'quality': 80, 'format': 'jpeg',
    },
    'auto_crop': {
        'auto_crop': True, 'grayscale': False, 'enhance': True, 'sharpen_sigma': 0.8,
        'max_width': 1600, 'quality': 85, 'format': 'jpeg',
    },
    'document_scan': {
        'auto_crop': True, 'grayscale': True, 'enhance': True, 'threshold': 160,
        'max_width': 2500, 'quality': 90,
    },
    'receipt': {
        'auto_crop': True, 'grayscale': False, 'enhance': True, 'threshold': 180,
        'max_width': 1500, 'quality': 85,
    },
    'text_enhancement': {
        'auto_crop': True, 'grayscale': True, 'enhance': True, 'threshold': 140,
        'max_width': 3000, 'quality': 95,
    },
    # Preparation for an OCR engine
    'ocr': {
        'auto_crop': False, 'grayscale': True, 'enhance': True, 'sharpen_sigma': 0.8,
        'threshold': 128, 'max_width': 0, 'quality': 90, 'format': 'jpeg',
    },
    # Storage compression of uploaded originals
    'compress': {
        'auto_crop': False, 'grayscale': False, 'enhance': False,
        'max_width': 1920, 'max_height': 1080, 'quality': 80, 'format': 'jpeg',
    },
}


def list_presets() -> List[str]:
    return sorted(PRESETS)


def get_preset(name: str, **overrides) -> ProcessingOptions:
    """Build options for preset ``name``, with keyword overrides applied on top.

    Raises:
        KeyError: if the preset does not exist
    """
    key = name.strip().lower().replace('-', '_').replace(' ', '_')
    if key not in PRESETS:
        raise KeyError(f"Unknown preset '{name}'. Available: {', '.join(list_presets())}")
    values = dict(PRESETS[key])
    values.update(overrides)
    return ProcessingOptions.from_dict(values)
