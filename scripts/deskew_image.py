"""
Deskew Command-Line Tool.

Measures the skew of a scanned page, reports the angle and confidence, and
writes the corrected page.

Usage:
    # Measure and correct a page
    python scripts/deskew_image.py --input page.png --output page_deskewed.png

    # Measure only, at full resolution for the refinement
    python scripts/deskew_image.py --input page.png --search-reduction 1

    # Custom configuration and score plots
    python scripts/deskew_image.py --input page.png --config my_skew.yaml --plot-dir plots/
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.skew.config_loader import DEFAULT_CONFIG_PATH, load_config  # noqa: E402
from src.skew.processor import SkewProcessor  # noqa: E402
from src.utils.io import load_bitmap, save_bitmap  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Measure and correct the skew of a scanned page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/deskew_image.py --input page.png --output page_deskewed.png
  python scripts/deskew_image.py --input page.png --search-reduction 1
        """,
    )

    parser.add_argument("--input", type=Path, required=True, help="Input page image")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output image (omit to only report the angle)",
    )
    parser.add_argument(
        "--search-reduction",
        type=int,
        default=2,
        choices=[1, 2, 4],
        help="Reduction factor for the refinement search (default: 2)",
    )
    parser.add_argument(
        "--threshold",
        type=int,
        default=None,
        help="Gray level below which a pixel is ink (default: Otsu)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Skew configuration YAML",
    )
    parser.add_argument(
        "--plot-dir",
        type=Path,
        default=None,
        help="Directory for sweep and search score plots",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log every sample score"
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point for the deskew tool."""
    args = parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if args.plot_dir is not None:
        config.debug.plot_dir = args.plot_dir
    if args.verbose:
        config.debug.log_scores = True

    try:
        page = load_bitmap(args.input, threshold=args.threshold)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    logger.info(f"Loaded {args.input} ({page.shape[1]}x{page.shape[0]})")

    processor = SkewProcessor(config=config)
    corrected, estimate = processor.find_skew_and_deskew(page, args.search_reduction)

    print("=" * 60)
    print(f"  Input:      {args.input}")
    print(f"  Status:     {estimate.status.value}")
    print(f"  Angle:      {estimate.angle:.3f} deg")
    print(f"  Confidence: {estimate.confidence:.2f}")
    if estimate.max_score is not None:
        print(f"  Max score:  {estimate.max_score:.1f}")
    print("=" * 60)

    if args.output is not None:
        save_bitmap(args.output, corrected)
        logger.info(f"Saved corrected page to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
