#!/usr/bin/env python3
"""
Fixture runner for the xdrc compiler.

Compiles every spec fixture under tests/specs/ and verifies that the
compiler returns the expected exit code:
- 0: Success (no errors, no warnings)
- 1: Success with warnings
- 2: Compilation failed with errors

Fixtures may also declare the diagnostic code they expect and text the
generated Rust must (or must not) contain; see fixture_metadata.py.

Usage:
    python tests/run_tests.py
    python tests/run_tests.py --verbose
    python tests/run_tests.py --filter union --json
"""

import argparse
import subprocess
import sys
import json
import os
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor, as_completed
import time
from tqdm import tqdm

from fixture_metadata import get_fixture_category, parse_fixture_metadata

EXPECTED_EXIT_CODES = {'success': 0, 'warning': 1, 'error': 2}


def get_expected_exit_code(fixture: Path) -> int:
    """Determine expected exit code based on filename convention.

    Convention:
    - test_*.x: expect 0 (success, no warnings)
    - test_warn_*.x: expect 1 (success with warnings)
    - test_err_*.x: expect 2 (compilation failed)
    """
    return EXPECTED_EXIT_CODES[get_fixture_category(fixture)]


def check_metadata(fixture: Path, stderr: str, out_path: Path) -> list[str]:
    """Compare compiler output with the fixture's declared expectations."""
    metadata = parse_fixture_metadata(fixture)
    problems = []

    for code in (metadata.expect_error, metadata.expect_warning):
        if code and f"[{code}]" not in stderr:
            problems.append(f"expected diagnostic {code}")

    generated = out_path.read_text(encoding='utf-8') if out_path.exists() else ""
    for text in metadata.expect_output_contains:
        if text not in generated:
            problems.append(f"generated code lacks {text!r}")
    for text in metadata.expect_output_absent:
        if text in generated:
            problems.append(f"generated code contains {text!r}")

    return problems


def run_single_test(fixture: Path, out_dir: Path, verbose: bool = False) -> tuple[str, bool, int, int, str]:
    """Compile a single fixture and return results."""
    test_name = fixture.name
    expected_exit_code = get_expected_exit_code(fixture)

    # Unique output per fixture; fixtures compile in parallel
    out_path = out_dir / f"{fixture.stem}.rs"
    if out_path.exists():
        out_path.unlink()

    try:
        result = subprocess.run(
            [sys.executable, "-m", "xdrc", str(fixture), "-o", str(out_path)],
            capture_output=True,
            text=True,
            timeout=30  # 30 second timeout per fixture
        )

        actual_exit_code = result.returncode
        problems = check_metadata(fixture, result.stderr, out_path)
        passed = actual_exit_code == expected_exit_code and not problems

        output = ""
        if result.stdout:
            output += f"STDOUT:\n{result.stdout}\n"
        if result.stderr:
            output += f"STDERR:\n{result.stderr}\n"
        for problem in problems:
            output += f"METADATA: {problem}\n"

        return test_name, passed, expected_exit_code, actual_exit_code, output

    except subprocess.TimeoutExpired:
        return test_name, False, expected_exit_code, -1, "TEST TIMEOUT"
    except OSError as e:
        return test_name, False, expected_exit_code, -1, f"TEST ERROR: {e}"


def main():
    parser = argparse.ArgumentParser(description="Run xdrc spec fixtures")
    parser.add_argument("-v", "--verbose", action="store_true",
                       help="Show detailed output for each fixture")
    parser.add_argument("-j", "--jobs", type=int, default=4,
                       help="Number of parallel jobs (default: 4)")
    parser.add_argument("--filter", type=str,
                       help="Only run fixtures matching this pattern")
    parser.add_argument("--json", action="store_true",
                       help="Output results in JSON format")

    args = parser.parse_args()

    project_root = Path(__file__).parent.parent
    tests_dir = project_root / "tests"
    specs_dir = tests_dir / "specs"
    out_dir = tests_dir / "out"

    out_dir.mkdir(exist_ok=True)

    # Run from the project root so `python -m xdrc` resolves to this checkout
    os.chdir(project_root)

    fixtures = sorted(specs_dir.rglob("test_*.x"))

    if args.filter:
        fixtures = [f for f in fixtures if args.filter in str(f.relative_to(specs_dir))]

    if not fixtures:
        if not args.json:
            print("No fixtures found!")
        return 1

    if not args.json:
        print(f"Running {len(fixtures)} fixtures with {args.jobs} parallel jobs...")
        print()

    start_time = time.time()

    results = []
    show_progress = not args.json and not args.verbose
    with ThreadPoolExecutor(max_workers=args.jobs) as executor:
        futures = {executor.submit(run_single_test, f, out_dir, args.verbose): f for f in fixtures}
        if show_progress:
            pbar = tqdm(total=len(fixtures), desc="Compiling fixtures", unit="spec",
                       bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]")
        for future in as_completed(futures):
            results.append(future.result())
            if show_progress:
                pbar.update(1)
        if show_progress:
            pbar.close()

    end_time = time.time()

    passed_tests = []
    failed_tests = []

    for test_name, passed, expected, actual, output in sorted(results):
        if passed:
            passed_tests.append(test_name)
            if args.verbose and not args.json:
                print(f"✓ {test_name} (expected: {expected}, actual: {actual})")
        else:
            failed_tests.append((test_name, expected, actual, output))
            if not args.json:
                print(f"✗ {test_name} (expected: {expected}, actual: {actual})")
                if args.verbose and output:
                    print(f"  Output: {output}")

    if args.json:
        json_output = {
            "total_tests": len(results),
            "passed": len(passed_tests),
            "failed": len(failed_tests),
            "duration_seconds": round(end_time - start_time, 2),
            "failed_tests": [
                {
                    "name": test_name,
                    "expected_exit_code": expected,
                    "actual_exit_code": actual,
                    "output": output,
                }
                for test_name, expected, actual, output in failed_tests
            ]
        }
        print(json.dumps(json_output, indent=2))
        return 1 if failed_tests else 0

    print()
    print(f"Fixture Results ({end_time - start_time:.2f}s):")
    print(f"  Passed: {len(passed_tests)}")
    print(f"  Failed: {len(failed_tests)}")
    print(f"  Total:  {len(results)}")

    if failed_tests:
        print()
        print("Failed fixtures:")
        for test_name, expected, actual, output in failed_tests:
            print(f"  {test_name}: expected {expected}, got {actual}")
        return 1

    print()
    print("All fixtures passed! ✓")
    return 0

if __name__ == "__main__":
    sys.exit(main())
