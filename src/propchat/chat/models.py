"""Composition DTO returned to chat callers."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..intent.models import Intent
from ..query.models import PropertyRecord


class ChatReply(BaseModel):
    """One answered question plus what a caller needs to page further."""
    intent: Intent
    response_text: str
    response: str = ""  # response_text plus the markdown results table
    results: List[PropertyRecord] = Field(default_factory=list)
    info_types: List[str] = Field(default_factory=list)
    total: int = 0
    has_more: bool = False
    current_offset: int = 0
    match_mode: Optional[str] = None  # exact | fuzzy, only for result-set intents
    aggregation: Optional[Dict[str, Any]] = None
