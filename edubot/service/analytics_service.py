# edubot/service/analytics_service.py

"""Dashboard aggregates over stored conversations."""

from collections import Counter
from datetime import datetime
from typing import Dict, Iterable, List

from edubot.model.helpdesk import (
    AnalyticsData,
    Conversation,
    ConversationStatus,
    DailyCount,
    NamedCount,
    Platform,
)


def _distribution(values: Iterable[str]) -> List[NamedCount]:
    # first-seen order, like the dashboard charts expect
    return [NamedCount(name=name, value=count) for name, count in Counter(values).items()]


def compute_analytics(conversations: List[Conversation]) -> AnalyticsData:
    total = len(conversations)
    resolved = sum(1 for c in conversations if c.status is ConversationStatus.RESOLVED)

    per_day = Counter(
        datetime.fromtimestamp(c.last_activity / 1000).date() for c in conversations
    )

    return AnalyticsData(
        total_queries=total,
        resolved_rate=round(resolved / total * 100) if total else 0,
        category_distribution=_distribution(c.category.value for c in conversations),
        sentiment_distribution=_distribution(c.sentiment.value for c in conversations),
        platform_distribution=_distribution(c.platform.value for c in conversations),
        queries_per_day=[
            DailyCount(day=day, count=count) for day, count in sorted(per_day.items())
        ],
    )


def platform_share(analytics: AnalyticsData) -> Dict[Platform, int]:
    """Percentage per channel, every platform present (0 when unused)."""
    counts = {item.name: item.value for item in analytics.platform_distribution}
    total = analytics.total_queries
    return {
        p: round(counts.get(p.value, 0) / total * 100) if total else 0
        for p in Platform
    }
