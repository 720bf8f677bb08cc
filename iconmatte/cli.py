#!/usr/bin/env python3
"""
Multi-Algorithm Background Removal CLI

Runs several independent background removal algorithms over each input
image and writes one transparent PNG per algorithm for side-by-side
comparison.
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from iconmatte.pipeline import (
    ALGORITHM_CATALOG,
    DEFAULT_ALGORITHMS,
    Orchestrator,
    PipelineConfig,
    PipelineLogger,
    RunStatus,
    SegmentationServiceConfig,
)
from iconmatte.pipeline.errors import DecodeError, UnknownAlgorithmError


def parse_algorithms(value: str) -> tuple[str, ...]:
    """Comma-separated list of algorithm ids"""
    ids = tuple(part.strip() for part in value.split(",") if part.strip())
    unknown = [algorithm_id for algorithm_id in ids if algorithm_id not in ALGORITHM_CATALOG]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"unknown algorithm(s): {', '.join(unknown)} "
            f"(choose from {', '.join(ALGORITHM_CATALOG)})"
        )
    if not ids:
        raise argparse.ArgumentTypeError("no algorithms given")
    return ids


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iconmatte",
        description="Remove image backgrounds with several algorithms and compare the results",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # All algorithms, results next to the input
  %(prog)s logo.png

  # Only the local algorithms, into a results folder
  %(prog)s --algorithms icon,gimp,inkscape -o results/ logo.png

  # Looser flood fill with debug logging
  %(prog)s --tolerance 60 --debug logo.png
        """,
    )

    # Positional arguments
    parser.add_argument("files", nargs="*", type=Path, help="Input image files")

    # Algorithm selection
    parser.add_argument(
        "-a",
        "--algorithms",
        type=parse_algorithms,
        default=DEFAULT_ALGORITHMS,
        metavar="IDS",
        help=f"Comma-separated algorithm ids (default: {','.join(DEFAULT_ALGORITHMS)})",
    )
    parser.add_argument(
        "--list-algorithms",
        action="store_true",
        help="List available algorithms and exit",
    )

    # Output options
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        help="Output directory (default: <input stem>_transparent/ next to each input)",
    )

    # Variant options
    parser.add_argument(
        "--tolerance", type=float, help="Icon: flood fill color tolerance (default: 35)"
    )
    parser.add_argument(
        "--no-smoothing",
        action="store_true",
        help="Icon/Inkscape: disable alpha smoothing and median denoising",
    )
    parser.add_argument(
        "--color-tolerance",
        type=float,
        help="GIMP-style: color selection tolerance (default: 25)",
    )
    parser.add_argument(
        "--feather-radius",
        type=float,
        help="GIMP-style: feather radius in pixels, 0 disables (default: 2)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        help="Inkscape-style: color distance threshold (default: 128)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help=(
            "Seconds to wait for the segmentation model (default: 120). "
            "A timed-out model keeps running in the background until it "
            "finishes, and the process waits for it before exiting"
        ),
    )

    # Logging options
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug mode with detailed logging"
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Custom log file path (default: ~/.local/share/iconmatte/debug.log)",
    )

    return parser


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Apply command line overrides to the default configuration"""
    config = PipelineConfig(algorithms=args.algorithms, output_dir=args.output_dir)

    if args.tolerance is not None:
        config.icon = replace(config.icon, tolerance=args.tolerance)
    if args.no_smoothing:
        config.icon = replace(config.icon, smoothing=False)
        config.inkscape = replace(config.inkscape, smoothing=False)
    if args.color_tolerance is not None:
        config.gimp = replace(config.gimp, color_tolerance=args.color_tolerance)
    if args.feather_radius is not None:
        config.gimp = replace(config.gimp, feather_radius=args.feather_radius)
    if args.threshold is not None:
        config.inkscape = replace(config.inkscape, threshold=args.threshold)
    if args.timeout is not None:
        config.segmentation = SegmentationServiceConfig(timeout_seconds=args.timeout)

    return config


def output_dir_for(input_path: Path, config: PipelineConfig, multiple: bool) -> Path:
    """
    Directory the results of ``input_path`` are written to

    With --output-dir and several inputs each image gets its own subfolder.
    """
    if config.output_dir is None:
        return input_path.with_name(f"{input_path.stem}_transparent")
    if multiple:
        return config.output_dir / input_path.stem
    return config.output_dir


def list_algorithms() -> None:
    for info in ALGORITHM_CATALOG.values():
        print(f"{info.algorithm_id:<12} {info.display_name:<16} {info.description}")


def main(argv=None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_algorithms:
        list_algorithms()
        return 0

    if not args.files:
        parser.error("at least one input file is required")

    # Create logger
    logger = PipelineLogger(
        log_file=args.log_file, debug_mode=args.debug, verbose=args.verbose
    )
    config = build_config(args)
    orchestrator = Orchestrator(config=config, logger=logger)

    logger.log_info(f"Processing {len(args.files)} image(s)...")

    success_count = 0
    multiple = len(args.files) > 1

    for file_path in args.files:
        try:
            report = orchestrator.process(file_path)
        except DecodeError as e:
            logger.log_error(f"✗ {file_path}: {e}")
            continue
        except UnknownAlgorithmError as e:
            logger.log_error(f"✗ {e}")
            return 2

        if report.status is RunStatus.FAILURE:
            logger.log_error(f"✗ {file_path}: {report.summary()}")
            continue

        target = output_dir_for(file_path, config, multiple)
        for path in report.save_all(target):
            logger.log_info(f"  Saved → {path}")

        print(f"{file_path}: {report.summary()} → {target}")
        success_count += 1

    logger.log_info(f"\nDone! Processed {success_count}/{len(args.files)} images.")

    return 0 if success_count == len(args.files) else 1


if __name__ == "__main__":
    sys.exit(main())
