import asyncio
from typing import Callable, List, Optional

import pytest

from edubot.database.helpdesk_store import HelpdeskStore
from edubot.database.local_storage import LocalStorage
from edubot.model.helpdesk import QueryAnalysis, QueryCategory, Sentiment
from edubot.service.chat_service import ChatService
from edubot.service.knowledge_base import KnowledgeBase
from edubot.service.llm_service import LanguageModelGateway


class FakeGateway(LanguageModelGateway):
    """
    In-memory gateway.

    - reply / deltas: what generation returns
    - analysis: a QueryAnalysis, or a callable(query) -> QueryAnalysis
    - *_error: exception raised by the corresponding call
    - stream_error_after: raise after this many deltas
    """

    def __init__(
        self,
        reply: Optional[str] = "Hello from EduBot",
        deltas: Optional[List[str]] = None,
        analysis=None,
        classify_error: Optional[Exception] = None,
        generate_error: Optional[Exception] = None,
        stream_error_after: Optional[int] = None,
    ):
        self.reply = reply
        self.deltas = deltas if deltas is not None else ["Hel", "lo", " world"]
        self.analysis = analysis or QueryAnalysis(
            category=QueryCategory.ADMISSIONS, sentiment=Sentiment.NEUTRAL
        )
        self.classify_error = classify_error
        self.generate_error = generate_error
        self.stream_error_after = stream_error_after

        self.log: List[tuple] = []
        self.generate_calls: List[dict] = []
        self.classify_calls: List[str] = []

        # hooks for concurrency tests
        self.before_generate: Optional[Callable] = None
        self.before_classify: Optional[Callable] = None
        self.block_stream_after: Optional[int] = None

    async def _classify(self, query: str) -> QueryAnalysis:
        self.classify_calls.append(query)
        if self.before_classify is not None:
            await self.before_classify()
        if self.classify_error is not None:
            raise self.classify_error
        if callable(self.analysis):
            return self.analysis(query)
        return self.analysis

    async def _generate(self, query, history, context):
        self.log.append(("generate", query))
        self.generate_calls.append({"query": query, "history": list(history), "context": context})
        if self.before_generate is not None:
            await self.before_generate()
        if self.generate_error is not None:
            raise self.generate_error
        return self.reply

    async def _stream(self, query, history, context):
        self.log.append(("stream", query))
        self.generate_calls.append({"query": query, "history": list(history), "context": context})
        for i, delta in enumerate(self.deltas):
            if self.stream_error_after is not None and i == self.stream_error_after:
                raise RuntimeError("connection reset")
            if self.block_stream_after is not None and i == self.block_stream_after:
                await asyncio.Event().wait()
            await asyncio.sleep(0)
            yield delta
        if self.stream_error_after is not None and self.stream_error_after >= len(self.deltas):
            raise RuntimeError("connection reset")


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(str(tmp_path / "storage"), namespace="test")


@pytest.fixture
def store(storage) -> HelpdeskStore:
    return HelpdeskStore(storage)


@pytest.fixture
def knowledge_base(store) -> KnowledgeBase:
    return KnowledgeBase(store)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def chat_service(store, gateway, knowledge_base) -> ChatService:
    return ChatService(store, gateway, knowledge_base)


@pytest.fixture
def session(chat_service):
    return chat_service.open_session("STUD-001", "Demo Student")
