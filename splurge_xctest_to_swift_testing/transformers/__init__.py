"""Tree transformations for XCTest to Swift Testing migration.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from .assertion_rules import ASSERTION_RULES, needs_explicit_boolean_comparison, rewrite_assertion
from .formatting import fix_optional_subscripts, reconcile_formatting, sort_imports
from .scope_classifier import Representation, ScopeAnalysis, analyze_scope
from .validation import validate_supported_patterns
from .xctest_transformer import XCTestToSwiftTestingTransformer, migrated_test_name, transform_xctest

__all__ = [
    "ASSERTION_RULES",
    "Representation",
    "ScopeAnalysis",
    "XCTestToSwiftTestingTransformer",
    "analyze_scope",
    "fix_optional_subscripts",
    "migrated_test_name",
    "needs_explicit_boolean_comparison",
    "reconcile_formatting",
    "rewrite_assertion",
    "sort_imports",
    "transform_xctest",
    "validate_supported_patterns",
]
