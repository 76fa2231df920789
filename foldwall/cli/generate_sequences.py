"""CLI for simulating every scenario of a CSV."""

import argparse
from pathlib import Path

from foldwall.generators import SequenceGenerator
from foldwall.logging_config import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Simulate folding-wall scenarios from CSV configuration")
    parser.add_argument("csv", type=Path, help="Path to scenario CSV file")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output root directory")
    parser.add_argument("-t", "--texture", type=Path, default=None, help="Image used for preview renders")
    parser.add_argument("-w", "--workers", type=int, default=4, help="Number of parallel workers")
    parser.add_argument("--no-preview", action="store_true", help="Don't render preview PNGs")
    parser.add_argument("--no-skip", action="store_true", help="Don't skip existing outputs")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bar")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")

    args = parser.parse_args()
    setup_logging(args.log_level)

    gen = SequenceGenerator(args.csv, args.output, texture_path=args.texture, write_previews=not args.no_preview)
    results = gen.generate(
        num_workers=args.workers,
        skip_existing=not args.no_skip,
        progress=not args.no_progress,
    )

    print(f"\nGeneration complete:")
    print(f"  Total scenarios: {results['total']}")
    print(f"  Processed: {results['processed']}")
    print(f"  Skipped: {results['skipped']}")
    print(f"  Errors: {len(results['errors'])}")

    if results['errors']:
        print("\nErrors:")
        for err in results['errors'][:10]:
            print(f"  {err['scenario_id']}: {err['error']}")
        if len(results['errors']) > 10:
            print(f"  ... and {len(results['errors']) - 10} more")


if __name__ == "__main__":
    main()
