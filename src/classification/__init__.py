"""URL classification for newsletter links."""

from src.classification.classifier import (
    CANONICAL_RULES,
    STANDARD_RULES,
    UTM_RULE,
    LinkClassifier,
    LinkRule,
    classify_url,
)

__all__ = [
    "CANONICAL_RULES",
    "LinkClassifier",
    "LinkRule",
    "STANDARD_RULES",
    "UTM_RULE",
    "classify_url",
]
