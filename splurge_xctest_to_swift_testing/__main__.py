"""Main entry point for running splurge-xctest-to-swift-testing as a module.

This allows users to run the CLI with:
    python -m splurge_xctest_to_swift_testing [command] [options]
"""

from .cli import main

if __name__ == "__main__":
    main()
