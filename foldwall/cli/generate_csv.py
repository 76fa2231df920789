"""CLI for generating scenario CSV files."""

import argparse
from pathlib import Path

from foldwall.generators import ScenarioGenerator
from foldwall.logging_config import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Generate scenario CSV for batch wall simulation")
    parser.add_argument("config", type=Path, help="Path to YAML configuration file")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output CSV file")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")

    args = parser.parse_args()
    setup_logging(args.log_level)

    gen = ScenarioGenerator(args.config)
    n = gen.generate(args.output)
    print(f"Generated {n} scenarios -> {args.output}")


if __name__ == "__main__":
    main()
