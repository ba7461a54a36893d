"""
Per-invocation processing options.

The surrounding web layer sends options as camelCase JSON
(``autoCrop``, ``maxWidth`` ...); ``ProcessingOptions.from_dict`` accepts
both that form and the snake_case field names.
"""
from dataclasses import dataclass, fields, replace as dataclass_replace
from typing import Any, Dict, Optional

from scan_tools.exceptions import OptionsError


CAMEL_CASE_ALIASES = {
    'autoCrop': 'auto_crop',
    'removeBorders': 'remove_borders',
    'maxWidth': 'max_width',
    'maxHeight': 'max_height',
    'sharpenSigma': 'sharpen_sigma',
}


def _coerce(name: str, value: Any, kind: type):
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise OptionsError(f"{name} must be a number, got {value!r}") from e


@dataclass(frozen=True)
class ProcessingOptions:
    """Options controlling detection, enhancement and encoding.

    Fields:
        auto_crop: Run the full detection chain and crop to the result.
        remove_borders: Run the cheap bright-border check only (implied by auto_crop).
        enhance: Contrast normalization followed by a mild sharpen.
        grayscale: Convert to single-channel luminance.
        threshold: Binarize at this luminance cutoff (None or 0 disables).
        max_width: Downscale to at most this width (0 = no limit).
        max_height: Downscale to at most this height (0 = no limit).
        quality: Encoder quality 1-100 (JPEG/WEBP).
        format: Output format name, 'jpeg', 'png' or 'webp'.
        sharpen_sigma: Gaussian sigma of the sharpening step.
    """
    auto_crop: bool = True
    remove_borders: bool = False
    enhance: bool = True
    grayscale: bool = True
    threshold: Optional[int] = None
    max_width: int = 2000
    max_height: int = 0
    quality: int = 80
    format: str = 'jpeg'
    sharpen_sigma: float = 0.5

    def __post_init__(self):
        if self.threshold is not None:
            threshold = _coerce('threshold', self.threshold, int)
            if not 0 <= threshold <= 255:
                raise OptionsError(f"threshold must be between 0 and 255, got {self.threshold}")
            object.__setattr__(self, 'threshold', threshold)

        quality = _coerce('quality', self.quality, int)
        if not 1 <= quality <= 100:
            raise OptionsError(f"quality must be between 1 and 100, got {self.quality}")
        max_width = _coerce('max_width', self.max_width, int)
        max_height = _coerce('max_height', self.max_height, int)
        if max_width < 0 or max_height < 0:
            raise OptionsError("max_width and max_height must be >= 0")
        sharpen_sigma = _coerce('sharpen_sigma', self.sharpen_sigma, float)
        if sharpen_sigma <= 0:
            raise OptionsError(f"sharpen_sigma must be positive, got {self.sharpen_sigma}")

        object.__setattr__(self, 'quality', quality)
        object.__setattr__(self, 'max_width', max_width)
        object.__setattr__(self, 'max_height', max_height)
        object.__setattr__(self, 'sharpen_sigma', sharpen_sigma)
        object.__setattr__(self, 'format', str(self.format).lower())

    @property
    def binarize(self) -> bool:
        return self.threshold is not None and self.threshold > 0

    @property
    def detection_enabled(self) -> bool:
        return self.auto_crop or self.remove_borders

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], defaults: Optional['ProcessingOptions'] = None) -> 'ProcessingOptions':
        """Build options from a request dictionary, ignoring unknown keys."""
        base = defaults or cls()
        if not data:
            return base

        known = {f.name for f in fields(cls)}
        changes = {}
        for key, value in data.items():
            name = CAMEL_CASE_ALIASES.get(key, key)
            if name in known:
                changes[name] = value
        return dataclass_replace(base, **changes)

    def replace(self, **changes) -> 'ProcessingOptions':
        return dataclass_replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
