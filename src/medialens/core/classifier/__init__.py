"""Rule-based movie versus series classification."""

from medialens.core.classifier.rules import (
    Classification,
    ClassificationResult,
    Err,
    Ok,
    Rule,
    RuleResult,
    TypeClassifier,
)

__all__ = [
    "Classification",
    "ClassificationResult",
    "Err",
    "Ok",
    "Rule",
    "RuleResult",
    "TypeClassifier",
]
