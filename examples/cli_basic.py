#!/usr/bin/env python3
"""CLI example that invokes the package CLI via subprocess.

This example prints version output and runs ``migrate --dry-run`` on a
small XCTest file. It uses subprocess so the actual CLI entry point is
exercised.
"""

import subprocess
import sys
import tempfile
from pathlib import Path


def _run_cli(args: list[str]) -> subprocess.CompletedProcess:
    cmd = [sys.executable, "-m", "splurge_xctest_to_swift_testing"] + args
    print("$", " ".join(cmd))
    return subprocess.run(cmd, capture_output=True, text=True, check=False)


def run_cli_example() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        example_file = Path(tmp) / "ExampleTests.swift"
        example_file.write_text(
            """import XCTest

class ExampleTests: XCTestCase {
    func testAdd() {
        XCTAssertEqual(1 + 1, 2)
    }
}
""",
            encoding="utf-8",
        )

        ver = _run_cli(["version"])
        print("--- VERSION STDOUT ---")
        print(ver.stdout or "<no stdout>")

        mig = _run_cli(["migrate", "--dry-run", "--file", str(example_file)])
        print("--- MIGRATE STDOUT ---")
        print(mig.stdout or mig.stderr or "<no output>")


if __name__ == "__main__":
    run_cli_example()
