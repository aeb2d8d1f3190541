"""Command-line interface rendering a demonstration price list."""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .config import DocumentConfig, PAGE_SIZES, ORIENTATIONS, load_config
from .document import render_tables
from .errors import TableLayoutError
from .sample_data import generate_price_list


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render a paginated price list PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("pricelist.pdf"),
        help="Output PDF path",
    )
    parser.add_argument(
        "--sections",
        type=int,
        default=3,
        help="Number of product categories",
    )
    parser.add_argument(
        "--rows",
        type=int,
        default=12,
        help="Products per category",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for the sample data",
    )
    parser.add_argument(
        "--title",
        help="Page title (overrides config)",
    )
    parser.add_argument(
        "--page-size",
        choices=sorted(PAGE_SIZES),
        type=str.upper,
        help="Page size (overrides config)",
    )
    parser.add_argument(
        "--orientation",
        choices=ORIENTATIONS,
        help="Page orientation (overrides config)",
    )
    parser.add_argument(
        "--link-height",
        type=float,
        help="Keep the last row together with a following block of this height",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> DocumentConfig:
    """Load config and apply command-line overrides."""
    config = load_config(args.config)

    if args.page_size:
        config.page_size = args.page_size
    if args.orientation:
        config.orientation = args.orientation
    if args.title:
        config.page_title = args.title
        config.metadata.setdefault("title", args.title)

    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = resolve_config(args)
        table = generate_price_list(
            num_sections=args.sections,
            rows_per_section=args.rows,
            seed=args.seed,
            link_height=args.link_height,
        )
        results = render_tables(args.out, [table], config)
    except TableLayoutError as e:
        logging.getLogger(__name__).error("Rendering failed: %s", e)
        return 1

    result = results[0]
    print(f"Wrote {args.out}")
    print(f"  Rows: {len(result.placements)}")
    print(f"  Skipped rows: {len(result.skipped_rows)}")
    print(f"  Pages: {result.page_breaks + 1}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
