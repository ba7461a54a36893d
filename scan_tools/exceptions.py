"""
Exceptions raised by the scanning pipeline.

Only decode and encode problems (and invalid options) reach the caller.
Detection problems are reported as values, see ``scan_tools.models.results``.
"""


class ScanError(Exception):
    """Base class for all scanning errors."""


class DecodeError(ScanError):
    """Input bytes are not a readable raster image."""


class EncodeError(ScanError):
    """The processed image could not be encoded in the requested format."""


class OptionsError(ScanError, ValueError):
    """A processing option is outside its allowed range."""
