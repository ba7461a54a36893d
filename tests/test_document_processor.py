"""
End-to-end tests for DocumentProcessor.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from scan_tools.exceptions import DecodeError, EncodeError
from scan_tools.models import DetectionMethod, ProcessingOptions, Rectangle
from scan_tools.processors import DocumentProcessor
from tests.image_builders import (
    blank,
    decode_pixels,
    encode,
    page_on_desk,
    tightly_cropped_form,
)


@pytest.fixture(scope="module")
def processor():
    return DocumentProcessor()


@pytest.fixture(scope="module")
def desk_photo():
    pixels, page = page_on_desk(2000, 3000, 1400)
    return encode(pixels, 'JPEG', quality=90), page


class TestPageOnDesk:
    """A white page photographed on a dark desk."""

    def test_page_is_cropped(self, processor, desk_photo):
        """Test the page is cropped from the desk."""
        data, (px, py, pw, ph) = desk_photo
        outcome = processor.process(data, ProcessingOptions())

        assert outcome.crop_applied
        assert outcome.detection.method is DetectionMethod.BOUNDING_BOX
        rect = outcome.detection.rectangle
        assert rect.x <= px and rect.y <= py
        assert rect.right >= px + pw and rect.bottom >= py + ph
        assert rect.area < 0.7 * 2000 * 3000

    def test_page_proportions_kept(self, processor, desk_photo):
        """Test the output keeps A4 proportions."""
        data, _ = desk_photo
        outcome = processor.process(data, ProcessingOptions())
        width, height = outcome.processed_dimensions
        assert 1.3 < height / width < 1.55
        assert outcome.original_dimensions == (2000, 3000)
        assert outcome.crop_info.startswith("Cropped to")
        assert "bounding_box" in outcome.crop_info

    def test_border_check_fails_first(self, processor, desk_photo):
        """Test the border check fails on a dark desk."""
        data, _ = desk_photo
        outcome = processor.process(data, ProcessingOptions())
        first = outcome.detection.attempts[0]
        assert first.method is DetectionMethod.BORDER_REMOVAL
        assert not first.succeeded


class TestTightlyCroppedForm:
    """A form that already fills the frame is not cropped further."""

    def test_no_crop(self, processor):
        """Test a tightly framed form is left uncropped."""
        data = encode(tightly_cropped_form(1000, 1400))
        outcome = processor.process(data, ProcessingOptions())

        assert not outcome.crop_applied
        assert outcome.detection.method is DetectionMethod.NONE
        assert outcome.processed_dimensions == (1000, 1400)
        assert outcome.crop_info == "No document boundary detected; using full frame"


class TestThresholdOutput:
    """Binarized output contains only black and white."""

    def test_processed_pixels_bilevel(self, processor):
        """Test processed pixels are black or white."""
        pixels, _ = page_on_desk(800, 1200, 560)
        outcome = processor.process(encode(pixels), {'threshold': 128, 'format': 'png'})
        assert set(np.unique(outcome.processed_image.pixels)) <= {0, 255}

    def test_png_output_bilevel(self, processor):
        """Test the encoded PNG is black or white."""
        pixels, _ = page_on_desk(800, 1200, 560)
        outcome = processor.process(encode(pixels), {'threshold': 128, 'format': 'png'})
        assert outcome.mime_type == 'image/png'
        assert set(np.unique(decode_pixels(outcome.data))) <= {0, 255}


class TestOptions:
    """Option handling and detection switches."""

    def test_camel_case_auto_crop_disabled(self, processor):
        """Test camelCase autoCrop disables detection."""
        outcome = processor.process(encode(blank(400, 300)), {'autoCrop': False})
        assert outcome.crop_info == "Auto-crop disabled"
        assert not outcome.crop_applied
        assert outcome.detection.attempts == ()

    def test_remove_borders_only(self, processor):
        """Test border removal alone on a bright frame."""
        outcome = processor.process(encode(blank(400, 300)),
                                    ProcessingOptions(auto_crop=False, remove_borders=True))
        assert outcome.crop_applied
        assert outcome.detection.method is DetectionMethod.BORDER_REMOVAL
        assert outcome.processed_dimensions == (376, 276)
        assert "border_removal" in outcome.crop_info

    def test_remove_borders_on_large_photo(self, processor):
        """Test the border inset is applied on a full-size phone photo."""
        outcome = processor.process(encode(blank(2000, 2000)),
                                    ProcessingOptions(auto_crop=False, remove_borders=True, format='png'))
        assert outcome.crop_applied
        assert outcome.detection.method is DetectionMethod.BORDER_REMOVAL
        assert outcome.detection.rectangle == Rectangle(16, 16, 1968, 1968)
        assert outcome.processed_dimensions == (1968, 1968)

    def test_default_options_used(self):
        """Test processor default options."""
        processor = DocumentProcessor(default_options=ProcessingOptions(format='webp', auto_crop=False))
        outcome = processor.process(encode(blank(200, 150)))
        assert outcome.format == 'webp'
        assert outcome.mime_type == 'image/webp'

    def test_deterministic(self, processor, desk_photo):
        """Test identical input gives identical output."""
        data, _ = desk_photo
        first = processor.process(data, {'format': 'png', 'threshold': 150})
        second = processor.process(data, {'format': 'png', 'threshold': 150})
        assert first.data == second.data
        assert first.to_dict() == second.to_dict()

    def test_grayscale_reprocessing_is_stable(self, processor):
        """Test reprocessing grayscale output."""
        options = ProcessingOptions(auto_crop=False, enhance=False, max_width=0, format='png')
        first = processor.process(encode(blank(300, 200, value=180)), options)
        second = processor.process(first.data, options)
        assert second.data == first.data


class TestErrors:
    """Decode and encode failures."""

    def test_garbage_input(self, processor):
        """Test bytes that are not an image."""
        with pytest.raises(DecodeError):
            processor.process(b"definitely not an image")

    def test_empty_input(self, processor):
        """Test empty bytes."""
        with pytest.raises(DecodeError):
            processor.process(b"")

    def test_unsupported_output_format(self, processor):
        """Test an unsupported output format."""
        with pytest.raises(EncodeError):
            processor.process(encode(blank(200, 150)), {'format': 'bmp'})


class TestOutcome:
    """Reported metadata."""

    def test_to_dict(self, processor):
        """Test the response metadata."""
        data = encode(blank(400, 300))
        outcome = processor.process(data, {'autoCrop': False, 'format': 'jpeg'})
        result = outcome.to_dict()

        assert result['mimeType'] == 'image/jpeg'
        assert result['originalSize'] == len(data)
        assert result['processedSize'] == len(outcome.data)
        assert result['dimensions'] == {'original': {'width': 400, 'height': 300},
                                        'processed': {'width': 400, 'height': 300}}
        assert result['cropApplied'] is False
        assert result['compressionRatio'].endswith('%')

    def test_compression_ratio(self, processor):
        """Test the compression ratio."""
        data = encode(blank(400, 300))
        outcome = processor.process(data, {'autoCrop': False})
        expected = round((len(data) - len(outcome.data)) / len(data) * 100, 1)
        assert outcome.compression_ratio == expected
