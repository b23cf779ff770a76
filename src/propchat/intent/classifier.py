"""HTTP client for an OpenAI-compatible chat-completions intent classifier."""

import json
import os
import re
from typing import Any, Dict, Optional, Protocol

import requests

from ..config.loader import BASE_CLASSIFIER_DEFAULTS
from ..utils.logging import get_logger
from .models import ParsedQuery, fallback_parsed_query

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*", flags=re.IGNORECASE)

PROMPT_TEMPLATE = """You are a property database query assistant. For each user question:
1. Decide the query type
2. Extract query parameters (property name, location, information types)
3. Draft a short conversational reply

{schema_documentation}

Query types:
- property_lookup: a specific property by name ("Tell me about Ocean View")
- location_filter: properties in a place ("Show me properties in New Jersey")
- aggregation: statistics ("Who has the most properties?"); put one of
  owner_count, area_count, owner_with_most_properties, total_properties
  as the first info_type
- metadata: what information is available ("What information do you have?")
- unknown: none of the above

Return ONLY a JSON object, without markdown fences, shaped like:
{{
  "intent": "property_lookup" | "location_filter" | "aggregation" | "metadata" | "unknown",
  "filters": {{
    "property_name": "string or null",
    "location": {{"city": "string or null", "state": "string or null"}},
    "info_type": ["wifi", "owner"]
  }},
  "response_text": "draft reply"
}}"""


class IntentClassifier(Protocol):
    def classify(self, message: str, schema_documentation: str) -> ParsedQuery:
        ...


def parse_classifier_content(content: str) -> ParsedQuery:
    """
    Parse the model's reply into a ParsedQuery.

    Markdown code fences are stripped first. Fields that are missing or of
    the wrong type are treated as unconstrained.

    Raises:
        ValueError: If the content is not a JSON object
    """
    cleaned = _FENCE_RE.sub("", content or "").replace("```", "").strip()
    payload = json.loads(cleaned)
    if not isinstance(payload, dict):
        raise ValueError("Classifier reply must be a JSON object")
    return ParsedQuery.from_payload(payload)


class GroqIntentClassifier:
    """Calls a chat-completions endpoint (Groq by default) once per message."""

    def __init__(
        self,
        base_url: str = BASE_CLASSIFIER_DEFAULTS["base_url"],
        model: str = BASE_CLASSIFIER_DEFAULTS["model"],
        api_key: Optional[str] = None,
        timeout_seconds: float = BASE_CLASSIFIER_DEFAULTS["timeout_seconds"],
        max_tokens: int = BASE_CLASSIFIER_DEFAULTS["max_tokens"],
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "GroqIntentClassifier":
        return cls(
            base_url=settings["base_url"],
            model=settings["model"],
            api_key=os.getenv(settings["api_key_env"]),
            timeout_seconds=settings["timeout_seconds"],
            max_tokens=settings["max_tokens"],
        )

    def _build_payload(self, message: str, schema_documentation: str) -> Dict[str, Any]:
        prompt = PROMPT_TEMPLATE.format(schema_documentation=schema_documentation)
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                {"role": "user", "content": f'{prompt}\n\nUser message: "{message}"'},
            ],
        }

    def classify(self, message: str, schema_documentation: str) -> ParsedQuery:
        """
        Classify one user message.

        Never raises: transport, HTTP and parse failures all return the
        ``unknown`` fallback asking the user to rephrase.
        """
        if not self.api_key:
            logger.warning("No classifier API key configured; returning unknown intent")
            return fallback_parsed_query()

        try:
            response = requests.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=self._build_payload(message, schema_documentation),
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"] or ""
            return parse_classifier_content(content)
        except requests.RequestException as exc:
            logger.error(f"Intent classifier request failed: {exc}")
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error(f"Intent classifier reply could not be parsed: {exc}")
        return fallback_parsed_query()
