from .helpdesk import (
    FAQ,
    AnalyticsData,
    Conversation,
    ConversationStatus,
    DailyCount,
    Message,
    MessageRole,
    NamedCount,
    Platform,
    QueryAnalysis,
    QueryCategory,
    Sentiment,
    WebhookDirection,
    WebhookEvent,
)

__all__ = [
    "FAQ",
    "AnalyticsData",
    "Conversation",
    "ConversationStatus",
    "DailyCount",
    "Message",
    "MessageRole",
    "NamedCount",
    "Platform",
    "QueryAnalysis",
    "QueryCategory",
    "Sentiment",
    "WebhookDirection",
    "WebhookEvent",
]
