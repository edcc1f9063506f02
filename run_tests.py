#!/usr/bin/env python3
"""
Test Runner Script for the Trend Relevance Engine

This script provides a convenient way to run tests with formatted output
and automatic result file generation.

Usage:
    python run_tests.py                       # Run all tests
    python run_tests.py --category relevance  # Run specific category
    python run_tests.py --quick               # Stop on first failure
    python run_tests.py --verbose             # Verbose output
    python run_tests.py --list                # List available categories
"""

import argparse
import subprocess
import sys
from datetime import datetime
from pathlib import Path

# Test categories mapping
TEST_CATEGORIES = {
    "models": "tests/test_models.py",
    "matching": "tests/test_matching.py",
    "relevance": "tests/test_relevance.py",
    "decision": "tests/test_decision.py",
    "selector": "tests/test_selector.py",
    "metrics": "tests/test_metrics.py",
    "sources": "tests/test_sources.py",
    "pipeline": "tests/test_pipeline.py",
    "report": "tests/test_report.py",
    "cli": "tests/test_cli_behavior.py",
    "web": "tests/test_web_app.py",
    "config": "tests/test_config_validation.py",
}

CATEGORY_DESCRIPTIONS = {
    "models": "Data models - validation, coercion, JSON shapes",
    "matching": "Text matching - substring, word boundaries, domain keywords",
    "relevance": "Relevance scoring - factor caps, flags, reasons",
    "decision": "Decision scoring - sub-scores, composite, tiers",
    "selector": "Diversity selection - coverage, carve-outs, cardinality",
    "metrics": "Diversity metrics - coverage, exploration, balance",
    "sources": "Batch sources - JSON loading, classification",
    "pipeline": "Pipeline orchestration - stage order, error isolation",
    "report": "Report correctness - sections, grouping, file naming",
    "cli": "CLI behavior - argument parsing, output modes, exit codes",
    "web": "JSON API - endpoints and payload errors",
    "config": "Configuration validation - env vars, defaults, error messages",
}


def list_categories():
    """Print available test categories."""
    print("\n" + "=" * 60)
    print("AVAILABLE TEST CATEGORIES")
    print("=" * 60)

    for key, desc in CATEGORY_DESCRIPTIONS.items():
        print(f"  {key:12} - {desc}")

    print("\n" + "=" * 60)
    print("Usage examples:")
    print("  python run_tests.py --category relevance")
    print("  python run_tests.py --category selector,metrics")
    print("  python run_tests.py  # Run all")
    print("=" * 60)


def run_tests(categories=None, verbose=False, quick=False):
    """Run tests with specified options."""

    # Build pytest command
    cmd = [sys.executable, "-m", "pytest"]

    paths = [TEST_CATEGORIES[c] for c in categories or [] if c in TEST_CATEGORIES]
    unknown = [c for c in categories or [] if c not in TEST_CATEGORIES]
    if unknown:
        print(f"⚠️  Unknown categories ignored: {', '.join(unknown)}")

    cmd.extend(paths or ["tests/"])

    # Add options
    if verbose:
        cmd.append("-v")
    else:
        cmd.append("--tb=short")

    if quick:
        cmd.extend(["-x", "--ff"])  # Stop on first failure, failed first

    # Print header
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print("\n" + "=" * 60)
    print("TREND RELEVANCE ENGINE TEST RUNNER")
    print("=" * 60)
    print(f"Started:    {timestamp}")
    print(f"Categories: {', '.join(categories) if categories else 'ALL'}")
    print(f"Options:    {'verbose' if verbose else 'standard'}{', quick' if quick else ''}")
    print("=" * 60 + "\n")

    result = subprocess.run(cmd, cwd=Path(__file__).parent)

    return result.returncode


def main():
    parser = argparse.ArgumentParser(
        description="Run Trend Relevance Engine tests with formatted output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_tests.py                          # Run all tests
  python run_tests.py --category relevance     # Run relevance tests only
  python run_tests.py --category cli,pipeline  # Run multiple categories
  python run_tests.py --quick                  # Stop on first failure
  python run_tests.py --verbose                # Detailed output
  python run_tests.py --list                   # Show available categories
        """
    )

    parser.add_argument(
        "--category", "-c",
        type=str,
        help="Test category to run (comma-separated for multiple)",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show verbose output",
    )

    parser.add_argument(
        "--quick", "-q",
        action="store_true",
        help="Quick mode - stop on first failure",
    )

    parser.add_argument(
        "--list", "-l",
        action="store_true",
        help="List available test categories",
    )

    args = parser.parse_args()

    if args.list:
        list_categories()
        return 0

    categories = None
    if args.category:
        categories = [c.strip() for c in args.category.split(",")]

    return run_tests(
        categories=categories,
        verbose=args.verbose,
        quick=args.quick,
    )


if __name__ == "__main__":
    sys.exit(main())
