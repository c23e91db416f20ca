from datetime import datetime

from edubot.model.helpdesk import (
    Conversation,
    ConversationStatus,
    Message,
    MessageRole,
    Platform,
    QueryCategory,
    Sentiment,
)
from edubot.service.analytics_service import compute_analytics, platform_share


def _ms(year, month, day, hour=12):
    return int(datetime(year, month, day, hour).timestamp() * 1000)


def _conv(conv_id, category, sentiment, platform, status, last_activity):
    return Conversation(
        id=conv_id,
        student_id="s",
        student_name="n",
        messages=[Message(role=MessageRole.USER, text="q")],
        category=category,
        sentiment=sentiment,
        platform=platform,
        status=status,
        last_activity=last_activity,
    )


def test_empty():
    analytics = compute_analytics([])

    assert analytics.total_queries == 0
    assert analytics.resolved_rate == 0
    assert analytics.category_distribution == []
    assert platform_share(analytics) == {p: 0 for p in Platform}


def test_distributions_and_rates():
    conversations = [
        _conv("a", QueryCategory.FEES, Sentiment.NEGATIVE, Platform.WEB, ConversationStatus.ESCALATED, _ms(2026, 10, 2)),
        _conv("b", QueryCategory.FEES, Sentiment.NEUTRAL, Platform.WHATSAPP, ConversationStatus.RESOLVED, _ms(2026, 10, 1)),
        _conv("c", QueryCategory.EXAMS, Sentiment.POSITIVE, Platform.WEB, ConversationStatus.OPEN, _ms(2026, 10, 1, 9)),
    ]

    analytics = compute_analytics(conversations)

    assert analytics.total_queries == 3
    assert analytics.resolved_rate == 33
    assert [(c.name, c.value) for c in analytics.category_distribution] == [
        ("Fees & Finance", 2),
        ("Exams", 1),
    ]
    assert {s.name: s.value for s in analytics.sentiment_distribution} == {
        "Negative": 1,
        "Neutral": 1,
        "Positive": 1,
    }
    assert [(d.day.isoformat(), d.count) for d in analytics.queries_per_day] == [
        ("2026-10-01", 2),
        ("2026-10-02", 1),
    ]
    assert platform_share(analytics) == {
        Platform.WEB: 67,
        Platform.WHATSAPP: 33,
        Platform.FACEBOOK: 0,
    }


def test_serializes_with_camel_case_keys():
    record = compute_analytics([]).model_dump(by_alias=True)

    assert set(record) == {
        "totalQueries",
        "resolvedRate",
        "categoryDistribution",
        "sentimentDistribution",
        "platformDistribution",
        "queriesPerDay",
    }
