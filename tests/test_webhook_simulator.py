import pytest

from edubot.model.helpdesk import (
    ConversationStatus,
    MessageRole,
    Platform,
    QueryAnalysis,
    QueryCategory,
    Sentiment,
    WebhookDirection,
)
from edubot.service import webhook_simulator as simulator_module
from edubot.service.chat_service import ChatService
from edubot.service.webhook_simulator import WebhookSimulator

from conftest import FakeGateway


@pytest.fixture
def simulator(chat_service):
    return WebhookSimulator(chat_service, response_delay=0)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "platform, prefix, student_id",
    [
        (Platform.WHATSAPP, "wa-", "WTS-001"),
        (Platform.FACEBOOK, "fb-", "WTS-001"),
    ],
)
async def test_simulate_creates_new_conversation(simulator, store, platform, prefix, student_id):
    conv = await simulator.simulate(platform, "When are the exams?")

    assert conv.id.startswith(prefix)
    assert conv.platform is platform
    assert conv.student_id == student_id
    assert conv.student_name == f"{platform.value} User"
    assert conv.status is ConversationStatus.OPEN
    assert [m.role for m in conv.messages] == [MessageRole.USER, MessageRole.BOT]
    assert store.get_conversations() == [conv]


@pytest.mark.asyncio
async def test_each_message_is_a_separate_conversation(simulator, store, gateway):
    first = await simulator.simulate(Platform.WHATSAPP, "one")
    second = await simulator.simulate(Platform.WHATSAPP, "two")

    assert first.id != second.id
    assert [c.id for c in store.get_conversations()] == [second.id, first.id]
    # no prior history is ever passed to the model
    assert [call["history"] for call in gateway.generate_calls] == [[], []]


@pytest.mark.asyncio
async def test_event_log_in_then_out(simulator):
    await simulator.simulate(Platform.FACEBOOK, "hello")

    events = simulator.events
    assert [e.direction for e in events] == [WebhookDirection.INCOMING, WebhookDirection.OUTGOING]
    assert events[0].text == "hello"
    assert events[1].text == "Hello from EduBot"
    assert all(e.platform is Platform.FACEBOOK for e in events)


@pytest.mark.asyncio
async def test_persisted_before_outgoing_log(chat_service, store, monkeypatch):
    simulator = WebhookSimulator(chat_service, response_delay=1.0)
    observed = {}

    async def fake_sleep(delay):
        observed["delay"] = delay
        observed["stored"] = len(store.get_conversations())
        observed["events"] = [e.direction for e in simulator.events]

    monkeypatch.setattr(simulator_module.asyncio, "sleep", fake_sleep)

    await simulator.simulate(Platform.WHATSAPP, "hi")

    assert observed == {
        "delay": 1.0,
        "stored": 1,
        "events": [WebhookDirection.INCOMING],
    }


@pytest.mark.asyncio
async def test_blank_text_is_ignored(simulator, store):
    assert await simulator.simulate(Platform.WHATSAPP, "  ") is None
    assert simulator.events == []
    assert store.get_conversations() == []


@pytest.mark.asyncio
async def test_web_is_not_a_webhook_channel(simulator):
    with pytest.raises(ValueError):
        await simulator.simulate(Platform.WEB, "hi")


@pytest.mark.asyncio
async def test_negative_webhook_message_is_escalated(store, knowledge_base):
    gateway = FakeGateway(
        analysis=QueryAnalysis(category=QueryCategory.TECHNICAL, sentiment=Sentiment.NEGATIVE)
    )
    simulator = WebhookSimulator(ChatService(store, gateway, knowledge_base), response_delay=0)

    conv = await simulator.simulate(Platform.WHATSAPP, "The portal is broken again!!")

    assert conv.status is ConversationStatus.ESCALATED


@pytest.mark.asyncio
async def test_event_log_is_bounded(chat_service):
    simulator = WebhookSimulator(chat_service, response_delay=0, max_events=3)

    await simulator.simulate(Platform.WHATSAPP, "one")
    await simulator.simulate(Platform.WHATSAPP, "two")

    assert [e.text for e in simulator.events] == ["Hello from EduBot", "two", "Hello from EduBot"]

    simulator.clear_events()
    assert simulator.events == []
