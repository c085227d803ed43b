"""Step modules for individual pipeline operations.

Each step module contains the concrete implementations of individual
pipeline steps that perform specific transformations.
"""

from .analysis_steps import DetectXCTestStep, ValidateSupportedPatternsStep
from .parse_steps import ParseSourceStep, RenderSourceStep
from .transform_steps import ReconcileFormattingStep, RewriteXCTestStep

__all__ = [
    "ParseSourceStep",
    "DetectXCTestStep",
    "ValidateSupportedPatternsStep",
    "RewriteXCTestStep",
    "ReconcileFormattingStep",
    "RenderSourceStep",
]
