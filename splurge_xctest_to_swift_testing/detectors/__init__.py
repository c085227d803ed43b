"""Detection of XCTest usage in parsed Swift files."""

from .xctest_detector import XCTestDetector, contains_xctest

__all__ = ["XCTestDetector", "contains_xctest"]
