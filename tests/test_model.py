from edubot.model.helpdesk import (
    Conversation,
    ConversationStatus,
    Message,
    MessageRole,
    Platform,
    QueryAnalysis,
    QueryCategory,
    Sentiment,
)


def test_enum_parse_matches_values_case_insensitively():
    assert QueryCategory.parse("fees & finance") is QueryCategory.FEES
    assert QueryCategory.parse("Technical Support") is QueryCategory.TECHNICAL
    assert Sentiment.parse(" NEGATIVE ") is Sentiment.NEGATIVE
    assert Platform.parse("whatsapp") is Platform.WHATSAPP


def test_enum_parse_unknown_maps_to_default():
    assert QueryCategory.parse("Housing") is QueryCategory.OTHER
    assert QueryCategory.parse(None) is QueryCategory.OTHER
    assert Sentiment.parse("furious") is Sentiment.NEUTRAL
    assert Platform.parse(42) is Platform.WEB
    assert ConversationStatus.parse("closed") is ConversationStatus.OPEN


def test_query_analysis_never_holds_raw_strings():
    analysis = QueryAnalysis(category="Dorms", sentiment=None)

    assert analysis == QueryAnalysis.default()


def test_conversation_record_uses_camel_case_keys():
    conv = Conversation(
        id="abc",
        student_id="STUD-001",
        student_name="Demo Student",
        messages=[Message(role=MessageRole.USER, text="hi")],
    )

    record = conv.to_record()

    assert record["studentId"] == "STUD-001"
    assert record["studentName"] == "Demo Student"
    assert "lastActivity" in record
    assert record["status"] == "Open"
    assert record["category"] == "Other"
    assert record["messages"][0]["role"] == "user"
    assert Conversation.model_validate(record) == conv


def test_message_ids_sort_by_creation():
    ids = [Message(role=MessageRole.USER).id for _ in range(50)]

    assert ids == sorted(ids)
    assert len(set(ids)) == 50
