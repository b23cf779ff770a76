"""Chat service: classify a question, run the matching query, build the reply."""

from typing import Optional

from sqlalchemy.orm import Session

from ..catalog.schema_catalog import SchemaCatalog, default_catalog, generate_schema_documentation
from ..intent.classifier import IntentClassifier
from ..intent.models import Intent
from ..output.chat_reply import aggregation_text, metadata_text, render_markdown, results_text
from ..query.aggregation import AggregationKind, aggregate
from ..query.fuzzy import FUZZY_DISTANCE_THRESHOLD, FUZZY_SAMPLE_CAP
from ..query.pagination import DEFAULT_PAGE_SIZE
from ..query.resolver import resolve
from ..utils.logging import get_logger
from .models import ChatReply

logger = get_logger(__name__)

RESULT_SET_INTENTS = (Intent.PROPERTY_LOOKUP, Intent.LOCATION_FILTER)


def answer_question(
    session: Session,
    message: str,
    classifier: IntentClassifier,
    offset: int = 0,
    page_size: int = DEFAULT_PAGE_SIZE,
    catalog: Optional[SchemaCatalog] = None,
    sample_cap: int = FUZZY_SAMPLE_CAP,
    threshold: float = FUZZY_DISTANCE_THRESHOLD,
) -> ChatReply:
    """
    Answer one chat message.

    Args:
        session: SQLAlchemy session (request-scoped)
        message: Free-text question
        classifier: Intent classifier (external collaborator)
        offset: Page offset for result-set intents
        page_size: Page size for result-set intents
        catalog: Schema catalog (defaults to the process-wide one)
        sample_cap: Candidate cap for the fuzzy fallback
        threshold: Max fuzzy distance

    Returns:
        ChatReply; ``response`` holds the sentence plus any results table
    """
    catalog = catalog or default_catalog
    schema = catalog.get(session)
    parsed = classifier.classify(message, generate_schema_documentation(schema))
    logger.debug(f"Classified message as {parsed.intent.value}")

    reply = ChatReply(
        intent=parsed.intent,
        response_text=parsed.response_text,
        info_types=parsed.filters.info_types,
        current_offset=offset,
    )

    if parsed.intent in RESULT_SET_INTENTS:
        result = resolve(
            session,
            parsed.filters,
            offset=offset,
            limit=page_size,
            sample_cap=sample_cap,
            threshold=threshold,
        )
        reply.results = result.items
        reply.total = result.total
        reply.has_more = result.has_more
        reply.match_mode = result.match_mode
        reply.response_text = results_text(parsed.intent, result)

    elif parsed.intent is Intent.AGGREGATION:
        info_types = parsed.filters.info_types
        kind = info_types[0] if info_types else AggregationKind.TOTAL_PROPERTIES.value
        stat = aggregate(session, kind)
        reply.aggregation = stat.model_dump() if stat is not None else None
        reply.response_text = aggregation_text(kind, stat, parsed.response_text)

    elif parsed.intent is Intent.METADATA:
        reply.response_text = metadata_text(schema)

    reply.response = render_markdown(reply)
    return reply
