"""
Journal entry and analysis models.

``EntryRow`` is the shape of a row in the ``entries`` table and is the only
place backend data is validated; everything past the repository works with
``JournalEntry``. The analysis is stored in the row as a JSON object with
camelCase keys (``sentimentScore``, ``moodEmoji``), which ``Analysis``
accepts on input and ``Analysis.to_row()`` produces on output.
"""

import datetime
import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

MAX_TAGS = 5

_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_DATETIME = TypeAdapter(datetime.datetime)
_DATE = TypeAdapter(datetime.date)


def check_entry_date(value: Optional[str]) -> Optional[str]:
    """
    Accept an ISO-8601 date (``2025-06-10``) or date-time and keep the text
    as given. Anything else is rejected so it never reaches the backend.
    """
    if value is None:
        return value
    if not _ISO_DATE_PREFIX.match(value):
        raise ValueError("date must be an ISO-8601 date or date-time")
    for adapter in (_DATETIME, _DATE):
        try:
            adapter.validate_python(value)
            return value
        except ValidationError:
            continue
    raise ValueError("date must be an ISO-8601 date or date-time")


class Sentiment(str, Enum):
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"
    MIXED = "Mixed"


class Analysis(BaseModel):
    """AI reflection attached to an entry. Replaced wholesale on re-analysis."""
    model_config = ConfigDict(frozen=True)

    sentiment: Sentiment
    sentiment_score: float = Field(
        ge=-1,
        le=1,
        validation_alias=AliasChoices("sentiment_score", "sentimentScore"),
    )
    tags: List[str] = Field(default_factory=list, max_length=MAX_TAGS)
    summary: str
    advice: str
    mood_emoji: str = Field(validation_alias=AliasChoices("mood_emoji", "moodEmoji"))

    def to_row(self) -> Dict[str, Any]:
        return {
            "sentiment": self.sentiment.value,
            "sentimentScore": self.sentiment_score,
            "tags": list(self.tags),
            "summary": self.summary,
            "advice": self.advice,
            "moodEmoji": self.mood_emoji,
        }


class JournalEntry(BaseModel):
    id: str
    user_id: str
    title: str = ""
    content: str
    date: str
    updated_at: str
    analysis: Optional[Analysis] = None


class EntryDraft(BaseModel):
    """What the editor hands over on save. No id means it was never persisted."""
    id: Optional[str] = None
    title: str = ""
    content: str = ""
    date: Optional[str] = None
    analysis: Optional[Analysis] = None

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: Optional[str]) -> Optional[str]:
        return check_entry_date(value)

    @classmethod
    def from_entry(cls, entry: JournalEntry) -> "EntryDraft":
        return cls(
            id=entry.id,
            title=entry.title,
            content=entry.content,
            date=entry.date,
            analysis=entry.analysis,
        )


class EntryRow(BaseModel):
    """A row of the entries table as returned by the backend."""
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    title: Optional[str] = None
    content: str
    date: str
    updated_at: str
    analysis: Optional[Analysis] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        # Integer and UUID primary keys both come back as opaque strings
        if value is None:
            return value
        return str(value)

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: Optional[str]) -> Optional[str]:
        return check_entry_date(value)

    def to_entry(self) -> JournalEntry:
        return JournalEntry(
            id=self.id,
            user_id=self.user_id,
            title=self.title or "",
            content=self.content,
            date=self.date,
            updated_at=self.updated_at,
            analysis=self.analysis,
        )
