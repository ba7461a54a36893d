#!/usr/bin/env python3
"""
Crop and enhance photographed documents.

Usage:
    python scripts/scan_document.py photo1.jpg [photo2.jpg ...] [-o output_dir]
                                    [--preset document_scan] [--format png]

Each input is written as <stem>_scan.<ext> into the output directory
(default: next to the input).
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from scan_tools.config.manager import ConfigManager
from scan_tools.exceptions import EncodeError, OptionsError
from scan_tools.imaging.raster import ImageFormat
from scan_tools.presets import get_preset, list_presets
from scan_tools.processors.batch_processor import BatchProcessor
from scan_tools.processors.document_processor import DocumentProcessor

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Set up console logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crop and enhance photographed documents.")
    parser.add_argument('inputs', nargs='+', type=Path, help="Image files to process")
    parser.add_argument('-o', '--output-dir', type=Path, help="Directory for processed images")
    parser.add_argument('--preset', choices=list_presets(), help="Start from a named preset")
    parser.add_argument('--format', dest='format', help="Output format: jpeg, png or webp")
    parser.add_argument('--quality', type=int, help="Encoder quality 1-100")
    parser.add_argument('--threshold', type=int, help="Binarize at this luminance (0-255)")
    parser.add_argument('--max-width', type=int, help="Maximum output width (0 = unlimited)")
    parser.add_argument('--no-crop', action='store_true', help="Disable automatic cropping")
    parser.add_argument('--remove-borders', action='store_true', help="Only run the bright-border check")
    parser.add_argument('--color', action='store_true', help="Keep colour instead of grayscale")
    parser.add_argument('--no-enhance', action='store_true', help="Skip contrast normalization and sharpening")
    parser.add_argument('--config', help="Path to config.conf")
    parser.add_argument('-v', '--verbose', action='store_true', help="Debug logging")
    return parser


def options_from_args(args: argparse.Namespace, config: ConfigManager):
    """Combine config defaults, preset and command line flags."""
    options = get_preset(args.preset) if args.preset else config.get_default_options()

    overrides = {}
    if args.format:
        overrides['format'] = args.format
    if args.quality is not None:
        overrides['quality'] = args.quality
    if args.threshold is not None:
        overrides['threshold'] = args.threshold
    if args.max_width is not None:
        overrides['max_width'] = args.max_width
    if args.no_crop:
        overrides['auto_crop'] = False
    if args.remove_borders:
        overrides['auto_crop'] = False
        overrides['remove_borders'] = True
    if args.color:
        overrides['grayscale'] = False
    if args.no_enhance:
        overrides['enhance'] = False
    return options.replace(**overrides) if overrides else options


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    config = ConfigManager(args.config)
    try:
        options = options_from_args(args, config)
        extension = ImageFormat.parse(options.format).extension
    except (OptionsError, EncodeError, ValueError) as e:
        logger.error(f"Invalid options: {e}")
        return 2

    missing = [p for p in args.inputs if not p.is_file()]
    if missing:
        for path in missing:
            logger.error(f"File not found: {path}")
        return 2

    processor = DocumentProcessor(config.get_detection_config(), default_options=options)
    batch = BatchProcessor(processor, max_batch_size=0)
    result = batch.process_batch([p.read_bytes() for p in args.inputs], options)

    for item, source in zip(result.items, args.inputs):
        if not item.success:
            print(f"❌ {source.name}: {item.error}")
            continue
        out_dir = args.output_dir or source.parent
        out_dir.mkdir(parents=True, exist_ok=True)
        target = out_dir / f"{source.stem}_scan.{extension}"
        target.write_bytes(item.outcome.data)
        width, height = item.outcome.processed_dimensions
        print(f"✅ {source.name} -> {target} ({width}x{height}, {item.outcome.crop_info})")

    print(f"\nProcessed: {result.processed}, failed: {result.failed}")
    return 1 if result.failed else 0


if __name__ == "__main__":
    sys.exit(main())
