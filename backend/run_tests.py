#!/usr/bin/env python3
"""
Test runner with optional coverage.

Usage:
    python run_tests.py                  # All tests
    python run_tests.py unit             # Service and model tests
    python run_tests.py integration      # API tests through the FastAPI app
    python run_tests.py -k aggregation   # Pass a keyword filter through
    python run_tests.py --coverage       # Coverage for the app package
"""

import argparse
import subprocess
import sys
from pathlib import Path

SUITES = {
    "all": ["tests/"],
    "unit": ["-m", "unit", "tests/unit"],
    "integration": ["-m", "integration", "tests/integration"],
}


def build_command(args: argparse.Namespace) -> list[str]:
    cmd = [sys.executable, "-m", "pytest", *SUITES[args.suite]]

    if args.keyword:
        cmd.extend(["-k", args.keyword])
    if args.verbose:
        cmd.append("-v")
    if args.failfast:
        cmd.append("-x")
    if args.coverage:
        cmd.extend([
            "--cov=app",
            "--cov-report=term-missing",
            "--cov-report=html:coverage_html",
            "--cov-fail-under=70",
        ])
    return cmd


def main():
    parser = argparse.ArgumentParser(description="Run the mealplan-api test suites")
    parser.add_argument("suite", nargs="?", choices=sorted(SUITES), default="all")
    parser.add_argument("-k", "--keyword", help="Only run tests matching this expression")
    parser.add_argument("-c", "--coverage", action="store_true", help="Report coverage")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("-x", "--failfast", action="store_true", help="Stop on first failure")
    args = parser.parse_args()

    cmd = build_command(args)
    print(f"Running: {' '.join(cmd)}")
    print("=" * 60)

    result = subprocess.run(cmd, cwd=Path(__file__).parent)

    if args.coverage and result.returncode == 0:
        print("\nCoverage report: coverage_html/index.html")

    sys.exit(result.returncode)


if __name__ == "__main__":
    main()
