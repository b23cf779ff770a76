"""Plain-text and markdown rendering for chat replies (renderer only)."""

import json
from typing import List, Optional, Sequence

from ..catalog.schema_catalog import ColumnMetadata, get_static_properties_schema
from ..chat.models import ChatReply
from ..intent.models import Intent
from ..query.aggregation import AggregationResult, TopOwnerResult
from ..query.models import PropertyRecord, QueryResult

BASE_COLUMNS = [("Name", "name"), ("Address", "address"), ("Owner", "owner")]

NO_MATCH_TEXT = {
    Intent.PROPERTY_LOOKUP: (
        "I couldn't find any properties matching your query. Could you please rephrase? "
        "Or I can help you explore what properties are available."
    ),
    Intent.LOCATION_FILTER: (
        "No properties found in that location. Would you like to see all available "
        "properties or search by a different location?"
    ),
}

COUNT_LABELS = {
    "owner_count": "owners",
    "area_count": "areas",
    "total_properties": "properties",
}


def _format_cell(value: object) -> str:
    if value is None or value == "":
        return "-"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value).replace("|", "\\|")


def _extra_columns(info_types: Sequence[str]) -> List[tuple]:
    """Columns for requested info types that name a record attribute."""
    labels = {col.name: col.display_name for col in get_static_properties_schema()}
    base = {attr for _, attr in BASE_COLUMNS}
    extra = []
    for info in info_types:
        attr = info.strip().lower()
        if attr in PropertyRecord.model_fields and attr not in base and attr not in {a for _, a in extra}:
            extra.append((labels.get(attr, attr.replace("_", " ").title()), attr))
    return extra


def format_properties_table(records: Sequence[PropertyRecord], info_types: Sequence[str] = ()) -> str:
    """Render records as a markdown table (Name, Address, Owner + requested info)."""
    if not records:
        return ""

    columns = BASE_COLUMNS + _extra_columns(info_types)
    lines = [
        "| " + " | ".join(label for label, _ in columns) + " |",
        "| " + " | ".join("-" for _ in columns) + " |",
    ]
    for record in records:
        cells = [_format_cell(getattr(record, attr)) for _, attr in columns]
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines) + "\n"


def results_text(intent: Intent, result: QueryResult) -> str:
    if not result.items:
        return NO_MATCH_TEXT.get(intent, NO_MATCH_TEXT[Intent.PROPERTY_LOOKUP])
    shown = len(result.items)
    if intent is Intent.LOCATION_FILTER:
        return f"Found {result.total} properties in that location. Showing {shown} of {result.total}."
    return f"Found {result.total} property/properties. Showing {shown} of {result.total}."


def aggregation_text(kind: str, result: Optional[AggregationResult], draft: str) -> str:
    """Sentence for a statistic; keeps the classifier's draft if it is unavailable."""
    if result is None:
        return draft
    if isinstance(result, TopOwnerResult):
        if not result.name:
            return "No property owners are recorded yet."
        return f"{result.name} has the most properties with {result.count} properties."
    label = COUNT_LABELS.get(result.kind, kind.replace("_", " "))
    return f"There are {result.count} {label}."


def metadata_text(schema: Sequence[ColumnMetadata]) -> str:
    names = ", ".join(col.display_name for col in schema)
    return (
        f"I have information about {len(schema)} property attributes including: {names}. "
        "You can ask me about any property or get information like locations, owners, and amenities."
    )


def render_markdown(reply: ChatReply) -> str:
    table = format_properties_table(reply.results, reply.info_types)
    return f"{reply.response_text}\n\n{table}".strip()


def render_json(reply: ChatReply) -> str:
    return json.dumps(reply.model_dump(mode="json"), indent=2, sort_keys=True)
