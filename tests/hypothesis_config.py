"""
Hypothesis configuration for property-based testing.

This module configures Hypothesis settings for reproducible, performant,
and effective property-based testing in the splurge-xctest-to-swift-testing
library.
"""

import hypothesis
from hypothesis import HealthCheck, Phase, settings

# Configure Hypothesis globally for this test suite
hypothesis.settings.register_profile(
    "default",
    settings(
        # Reproducibility settings
        database=None,  # Disable database to avoid state between runs
        print_blob=True,  # Print minimal examples when tests fail
        # Performance settings
        max_examples=100,
        deadline=None,  # No time limit per test (rely on overall test timeout)
        phases=[
            Phase.explicit,
            Phase.reuse,
            Phase.generate,
            Phase.target,
            Phase.shrink,
        ],
        derandomize=True,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

hypothesis.settings.register_profile(
    "ci",
    settings(
        max_examples=200,
        deadline=None,
        print_blob=True,
        derandomize=True,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

hypothesis.settings.register_profile(
    "fast",
    settings(
        max_examples=25,
        deadline=None,
        print_blob=True,
        derandomize=True,
        phases=[
            Phase.explicit,
            Phase.reuse,
            Phase.generate,
            Phase.shrink,  # Skip target phase for speed
        ],
    ),
)

# Set default profile
hypothesis.settings.load_profile("default")

# Common settings that can be imported by test modules
DEFAULT_SETTINGS = settings(
    max_examples=100,
    deadline=None,
    print_blob=True,
    derandomize=True,
    suppress_health_check=[HealthCheck.too_slow],
)

# Whole-file migrations parse and rewrite a complete source per example
PERFORMANCE_SETTINGS = settings(
    max_examples=30,
    deadline=None,
    print_blob=True,
    derandomize=True,
    suppress_health_check=[HealthCheck.too_slow],
)
