# edubot/model/helpdesk.py

"""
Helpdesk data models

- Message / Conversation: one chat session and its turns
- FAQ: knowledge-base entry used as grounding context
- QueryAnalysis: category + sentiment of a single query
- AnalyticsData: dashboard aggregates

Records are stored with the camelCase keys of the legacy browser data
format (studentId, lastActivity, ...); Python code uses snake_case.
"""

from __future__ import annotations

import itertools
import time
import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def now_ms() -> int:
    """Current time in milliseconds since epoch."""
    return int(time.time() * 1000)


_message_seq = itertools.count()


def new_message_id() -> str:
    """Timestamp-derived id; sorts by creation order within a process."""
    return f"{now_ms()}-{next(_message_seq) % 1_000_000:06d}"


def new_conversation_id(prefix: str = "") -> str:
    return f"{prefix}{uuid.uuid4().hex[:8]}"


class _ParsableEnum(str, Enum):
    """str enum whose unknown values collapse to a default member."""

    @classmethod
    def default(cls):
        raise NotImplementedError

    @classmethod
    def parse(cls, value: Any):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            needle = value.strip().lower()
            for member in cls:
                if member.value.lower() == needle or member.name.lower() == needle:
                    return member
        return cls.default()


class QueryCategory(_ParsableEnum):
    ADMISSIONS = "Admissions"
    ACADEMICS = "Academics"
    FEES = "Fees & Finance"
    EXAMS = "Exams"
    SYLLABUS = "Syllabus"
    TECHNICAL = "Technical Support"
    OTHER = "Other"

    @classmethod
    def default(cls):
        return cls.OTHER


class Sentiment(_ParsableEnum):
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"

    @classmethod
    def default(cls):
        return cls.NEUTRAL


class Platform(_ParsableEnum):
    WEB = "Web"
    WHATSAPP = "WhatsApp"
    FACEBOOK = "Facebook"

    @classmethod
    def default(cls):
        return cls.WEB


class ConversationStatus(_ParsableEnum):
    OPEN = "Open"
    RESOLVED = "Resolved"
    ESCALATED = "Escalated"

    @classmethod
    def default(cls):
        return cls.OPEN


class MessageRole(str, Enum):
    USER = "user"
    BOT = "bot"


class Message(BaseModel):
    """One turn. Bot text is overwritten in place while a reply streams."""
    id: str = Field(default_factory=new_message_id)
    role: MessageRole
    text: str = ""
    timestamp: int = Field(default_factory=now_ms)


class Conversation(BaseModel):
    """One session's full record, as persisted."""
    id: str = Field(default_factory=new_conversation_id)
    student_id: str = Field(alias="studentId")
    student_name: str = Field(alias="studentName")
    messages: List[Message] = Field(default_factory=list)

    category: QueryCategory = QueryCategory.OTHER
    sentiment: Sentiment = Sentiment.NEUTRAL
    platform: Platform = Platform.WEB

    last_activity: int = Field(default_factory=now_ms, alias="lastActivity")
    status: ConversationStatus = ConversationStatus.OPEN

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("category", mode="before")
    @classmethod
    def _parse_category(cls, v):
        return QueryCategory.parse(v)

    @field_validator("sentiment", mode="before")
    @classmethod
    def _parse_sentiment(cls, v):
        return Sentiment.parse(v)

    @field_validator("platform", mode="before")
    @classmethod
    def _parse_platform(cls, v):
        return Platform.parse(v)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v):
        return ConversationStatus.parse(v)

    @property
    def last_message(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class FAQ(BaseModel):
    """Knowledge-base entry."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])
    question: str
    answer: str
    category: QueryCategory = QueryCategory.OTHER

    model_config = {
        "str_strip_whitespace": True,
    }

    @field_validator("category", mode="before")
    @classmethod
    def _parse_category(cls, v):
        return QueryCategory.parse(v)

    def to_record(self) -> dict:
        return self.model_dump(mode="json")


class QueryAnalysis(BaseModel):
    category: QueryCategory = QueryCategory.OTHER
    sentiment: Sentiment = Sentiment.NEUTRAL

    @field_validator("category", mode="before")
    @classmethod
    def _parse_category(cls, v):
        return QueryCategory.parse(v)

    @field_validator("sentiment", mode="before")
    @classmethod
    def _parse_sentiment(cls, v):
        return Sentiment.parse(v)

    @classmethod
    def default(cls) -> "QueryAnalysis":
        return cls(category=QueryCategory.OTHER, sentiment=Sentiment.NEUTRAL)


class NamedCount(BaseModel):
    name: str
    value: int


class DailyCount(BaseModel):
    day: date = Field(alias="date")
    count: int

    model_config = ConfigDict(populate_by_name=True)


class AnalyticsData(BaseModel):
    total_queries: int = Field(default=0, alias="totalQueries")
    resolved_rate: int = Field(default=0, alias="resolvedRate")
    category_distribution: List[NamedCount] = Field(default_factory=list, alias="categoryDistribution")
    sentiment_distribution: List[NamedCount] = Field(default_factory=list, alias="sentimentDistribution")
    platform_distribution: List[NamedCount] = Field(default_factory=list, alias="platformDistribution")
    queries_per_day: List[DailyCount] = Field(default_factory=list, alias="queriesPerDay")

    model_config = ConfigDict(populate_by_name=True)


class WebhookDirection(str, Enum):
    INCOMING = "in"
    OUTGOING = "out"


class WebhookEvent(BaseModel):
    """Display-only simulator log line."""
    direction: WebhookDirection
    platform: Platform
    text: str
    time: datetime = Field(default_factory=datetime.now)
