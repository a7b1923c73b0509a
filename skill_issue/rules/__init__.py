"""Rule variants and the registry that loads them."""

from .base import Rule
from .metadata_rule import MetadataValidationRule
from .mismatch_rule import DescriptionMismatchRule
from .regex_rule import RegexRule, RuleDefinition
from .registry import RuleRegistry
from .unicode_rule import UnicodeRule

__all__ = [
    "DescriptionMismatchRule",
    "MetadataValidationRule",
    "RegexRule",
    "Rule",
    "RuleDefinition",
    "RuleRegistry",
    "UnicodeRule",
]
