"""Intent classification contract and its HTTP client."""

from .classifier import GroqIntentClassifier, IntentClassifier, parse_classifier_content
from .models import Intent, ParsedQuery, fallback_parsed_query, filter_from_payload

__all__ = [
    "GroqIntentClassifier",
    "Intent",
    "IntentClassifier",
    "ParsedQuery",
    "fallback_parsed_query",
    "filter_from_payload",
    "parse_classifier_content",
]
