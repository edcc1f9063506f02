#!/usr/bin/env python3
"""
Trend Relevance Engine - Per-organization trend scoring and selection.

Command-line entry point for running the full pipeline:
  - Load a batch of trends and organizations from a JSON file
  - Score every trend for every organization and decision-score the top ones
  - Select a diversified set of trends per organization
  - Write a Markdown report per organization
  - Print execution summary

Usage:
    python main.py --batch batch.json                 # Run full pipeline
    python main.py --batch batch.json --skip-report   # Score and select only
    python main.py --batch batch.json --max-trends 5  # Select 5 per organization
    python main.py --batch batch.json --verbose       # Show detailed progress

Examples:
    # Development run (no reports, verbose)
    python main.py --batch samples/batch.json --skip-report --verbose

    # Machine-readable output
    python main.py --batch samples/batch.json --skip-report --json --quiet
"""

import argparse
import json
import sys

from relevance_engine import __version__
from relevance_engine.pipeline import (
    PipelineConfig,
    PipelineResult,
    RelevancePipeline,
)
from relevance_engine.config import (
    DECISION_TOP_N,
    DEFAULT_MAX_TRENDS,
    REPORT_OUTPUT_DIR,
    print_config_summary,
    validate_config,
)
from relevance_engine.sources import JsonFileSource


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="trend-relevance",
        description="Score, select and report trends for each organization in a batch.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --batch batch.json                    Run full pipeline with defaults
  %(prog)s --batch batch.json --skip-report      Score and select, no report files
  %(prog)s --batch batch.json --max-trends 5     Select at most 5 trends per organization
  %(prog)s --batch batch.json --no-exploration   Disable the exploration quota
  %(prog)s --batch batch.json --json -q          Print the result as JSON only
        """,
    )

    # Core options
    parser.add_argument(
        "--batch", "-b",
        metavar="PATH",
        help="JSON file with trends and organizations (required unless --show-config)",
    )

    parser.add_argument(
        "--max-trends", "-m",
        type=int,
        default=None,
        metavar="N",
        help=f"Maximum trends selected per organization (default: {DEFAULT_MAX_TRENDS})",
    )

    parser.add_argument(
        "--decision-top",
        type=int,
        default=None,
        metavar="N",
        help=f"Decision-score the N most relevant trends (default: {DECISION_TOP_N})",
    )

    parser.add_argument(
        "--classify-untagged",
        action="store_true",
        help="Tag trends without domains using policy keyword matching",
    )

    # Selection options
    parser.add_argument(
        "--no-breaking",
        action="store_true",
        help="Disable the breaking-news carve-out",
    )

    parser.add_argument(
        "--no-exploration",
        action="store_true",
        help="Disable the exploration quota for new opportunities",
    )

    # Report options
    parser.add_argument(
        "--output-dir",
        default=None,
        metavar="DIR",
        help=f"Directory for report files (default: {REPORT_OUTPUT_DIR})",
    )

    parser.add_argument(
        "--skip-report",
        action="store_true",
        help="Skip report generation",
    )

    # Output options
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress and debug info",
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only show errors (and JSON output if requested)",
    )

    # Info options
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("Trend Relevance Engine Configuration")
    print("=" * 60)
    print_config_summary()

    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def print_result_summary(result: PipelineResult, verbose: bool = False) -> None:
    """Print the pipeline result summary."""
    print(result.to_summary())

    if verbose:
        for org in result.organization_results:
            if not org.success or not org.selected:
                continue
            print(f"\nTop trends for {org.label}:")
            for st in org.selected[:5]:
                print(f"  [{st.score:>3}] {st.trend.title}")


def main(argv: list = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 = success, 1 = error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Handle --show-config
    if args.show_config:
        show_config()
        return 0

    if not args.batch:
        parser.error("--batch is required")

    # Print header (unless quiet)
    if not args.quiet:
        print("=" * 60)
        print("Trend Relevance Pipeline")
        print("=" * 60)

        if args.verbose:
            print("\nConfiguration:")
            print_config_summary()
            print()

    # Create pipeline config from CLI args
    config = PipelineConfig.from_args(args)

    # Show effective settings
    if not args.quiet:
        print("Settings:")
        print(f"  Batch: {args.batch}")
        print(f"  Max trends: {config.max_trends}")
        print(f"  Decision top: {config.decision_top_n}")
        print(f"  Breaking carve-out: {config.selector.enable_breaking}")
        print(f"  Exploration: {config.selector.enable_exploration}")
        print(f"  Report dir: {'SKIPPED' if config.skip_report else config.report_output_dir}")
        print()

    # Run the pipeline
    try:
        source = JsonFileSource(args.batch, classify_untagged=args.classify_untagged)
        pipeline = RelevancePipeline(config)
        result = pipeline.run_source(source)

        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
        elif not args.quiet:
            print_result_summary(result, args.verbose)

        if result.errors:
            if not args.json:
                for error in result.errors:
                    print(f"\n❌ {error}")
            return 1

        if result.all_failed:
            # Every organization failed
            return 1

        return 0

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except Exception as e:
        print(f"\n❌ Pipeline error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
