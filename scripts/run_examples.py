#!/usr/bin/env python3
"""Run the example scripts against the live network and report results.

Usage:
    python scripts/run_examples.py            # every examples/*.py
    python scripts/run_examples.py pause      # only names containing "pause"

Examples run sequentially; the first failure stops the run.
"""

import subprocess
import sys
from pathlib import Path

EXAMPLE_TIMEOUT = 120  # seconds; examples pause mid-transfer on purpose


def find_examples(examples_dir: Path, patterns: list[str]) -> list[Path]:
    """Example files sorted by name, optionally filtered by substring."""
    examples = sorted(examples_dir.glob("[0-9]*.py"))
    if patterns:
        examples = [e for e in examples if any(p in e.name for p in patterns)]
    return examples


def run_example(example_path: Path) -> bool:
    """Run one example, printing its output. Returns True on success."""
    print(f"Running: {example_path.name}...", flush=True)

    try:
        result = subprocess.run(
            [sys.executable, str(example_path)],
            capture_output=True,
            text=True,
            timeout=EXAMPLE_TIMEOUT,
        )
    except subprocess.TimeoutExpired:
        print(f"✗ {example_path.name} TIMED OUT (>{EXAMPLE_TIMEOUT}s)")
        return False

    if result.stdout:
        print(result.stdout)
    if result.returncode != 0:
        print(f"✗ {example_path.name} FAILED (exit code {result.returncode})")
        if result.stderr:
            print("STDERR:")
            print(result.stderr)
        return False

    print(f"{example_path.name} passed\n")
    return True


def main(argv: list[str]) -> int:
    examples_dir = Path(__file__).parent.parent / "examples"
    if not examples_dir.exists():
        print(f"Error: Examples directory not found: {examples_dir}")
        return 1

    examples = find_examples(examples_dir, argv)
    if not examples:
        print(f"Warning: No matching example files in {examples_dir}")
        return 0

    print(f"Found {len(examples)} example(s) to run\n")
    print("=" * 60)

    for count, example in enumerate(examples):
        if not run_example(example):
            print("=" * 60)
            print(f"\nFAILED after {count}/{len(examples)} examples")
            return 1

    print("=" * 60)
    print(f"\nAll {len(examples)} example(s) passed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
