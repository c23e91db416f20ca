# edubot/service/chat_service.py

"""
Chat Service - 学生问答会话

功能：
- 打开 / 恢复会话
- 发送问题并获取回复（一次性 / 流式）
- 对问题分类（category + sentiment），决定是否升级
- 每次问答结束后保存完整的会话记录
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import aclosing
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from edubot.database.helpdesk_store import HelpdeskStore
from edubot.errors import GenerationError, SessionBusyError
from edubot.model.helpdesk import (
    Conversation,
    ConversationStatus,
    Message,
    MessageRole,
    Platform,
    QueryAnalysis,
    Sentiment,
    new_conversation_id,
    now_ms,
)
from edubot.service.knowledge_base import KnowledgeBase
from edubot.service.llm_service import APOLOGY_TEXT, History, LanguageModelGateway

logger = logging.getLogger(__name__)

OnUpdate = Callable[[Message], None]


class ExchangeMode(str, Enum):
    SYNC = "sync"
    STREAMING = "streaming"


@dataclass
class ChatSession:
    """
    In-memory state of one conversation.

    The store owns the persisted record; this holds the turn list while
    the chat panel is open, plus the one-exchange-at-a-time flag.
    """
    conversation_id: str
    student_id: str
    student_name: str
    platform: Platform = Platform.WEB
    messages: List[Message] = field(default_factory=list)
    status: ConversationStatus = ConversationStatus.OPEN
    in_flight: bool = False

    def history(self) -> History:
        """Turns in the gateway's role labels."""
        return [
            {
                "role": "user" if m.role is MessageRole.USER else "assistant",
                "content": m.text,
            }
            for m in self.messages
        ]


def resolve_status(
    sentiment: Sentiment,
    prior: ConversationStatus,
) -> ConversationStatus:
    """
    Negative → Escalated. Otherwise a Resolved / Escalated conversation keeps
    its status (no auto-resolve, no downgrade); everything else is Open.
    """
    if sentiment is Sentiment.NEGATIVE:
        return ConversationStatus.ESCALATED
    if prior in (ConversationStatus.RESOLVED, ConversationStatus.ESCALATED):
        return prior
    return ConversationStatus.OPEN


class ChatService:
    """学生问答服务"""

    def __init__(
        self,
        store: HelpdeskStore,
        llm: LanguageModelGateway,
        knowledge_base: Optional[KnowledgeBase] = None,
    ):
        self.store = store
        self.llm = llm
        self.knowledge_base = knowledge_base or KnowledgeBase(store)

    def open_session(
        self,
        student_id: str,
        student_name: str,
        platform: Platform = Platform.WEB,
        conversation_id: Optional[str] = None,
    ) -> ChatSession:
        """Start a new, empty session. Nothing is stored until the first exchange."""
        return ChatSession(
            conversation_id=conversation_id or new_conversation_id(),
            student_id=student_id,
            student_name=student_name,
            platform=platform,
        )

    def resume_session(self, conversation_id: str) -> Optional[ChatSession]:
        """Continue a stored conversation; None if it does not exist."""
        conv = self.store.get_conversation(conversation_id)
        if conv is None:
            return None
        return ChatSession(
            conversation_id=conv.id,
            student_id=conv.student_id,
            student_name=conv.student_name,
            platform=conv.platform,
            messages=list(conv.messages),
            status=conv.status,
        )

    async def submit_query(
        self,
        session: ChatSession,
        query_text: str,
        mode: ExchangeMode = ExchangeMode.SYNC,
        on_update: Optional[OnUpdate] = None,
    ) -> Optional[Conversation]:
        """
        Run one question/answer exchange and persist the conversation.

        Args:
            session: 会话
            query_text: 用户问题；空白 → 直接返回 None
            mode: 一次性 or 流式
            on_update: called with the user message, the bot message, and
                again after every streamed delta

        Returns:
            The persisted conversation, or None for a blank query.

        Raises:
            SessionBusyError: an exchange is already running on this session.
        """
        query = (query_text or "").strip()
        if not query:
            return None

        if session.in_flight:
            raise SessionBusyError(session.conversation_id)

        session.in_flight = True
        try:
            return await self._run_exchange(session, query, mode, on_update)
        finally:
            session.in_flight = False

    async def _run_exchange(
        self,
        session: ChatSession,
        query: str,
        mode: ExchangeMode,
        on_update: Optional[OnUpdate],
    ) -> Conversation:
        history = session.history()
        context = self.knowledge_base.context_text()

        # turns of an exchange that does not get persisted are dropped again
        turns_before = len(session.messages)
        user_message = Message(role=MessageRole.USER, text=query)
        session.messages.append(user_message)

        # Classification runs alongside generation and never delays the reply
        classification = asyncio.create_task(self.llm.classify(query))
        try:
            _notify(on_update, user_message)
            if mode is ExchangeMode.STREAMING:
                await self._stream_reply(session, query, history, context, on_update)
            else:
                await self._sync_reply(session, query, history, context, on_update)
            analysis = await classification

            conversation = self._build_conversation(session, analysis)
            self.store.save_conversation(conversation)
        except BaseException:
            classification.cancel()
            del session.messages[turns_before:]
            raise

        session.status = conversation.status

        logger.info(
            f"💬 Exchange done: {conversation.id} "
            f"[{conversation.category.value} / {conversation.sentiment.value} / {conversation.status.value}]"
        )
        return conversation

    async def _sync_reply(
        self,
        session: ChatSession,
        query: str,
        history: History,
        context: str,
        on_update: Optional[OnUpdate],
    ) -> Message:
        text = await self.llm.generate(query, history, context)
        bot_message = Message(role=MessageRole.BOT, text=text)
        session.messages.append(bot_message)
        _notify(on_update, bot_message)
        return bot_message

    async def _stream_reply(
        self,
        session: ChatSession,
        query: str,
        history: History,
        context: str,
        on_update: Optional[OnUpdate],
    ) -> Message:
        bot_message = Message(role=MessageRole.BOT, text="")
        session.messages.append(bot_message)
        _notify(on_update, bot_message)

        full_response = ""
        try:
            async with aclosing(self.llm.generate_stream(query, history, context)) as stream:
                async for delta in stream:
                    full_response += delta
                    bot_message.text = full_response
                    _notify(on_update, bot_message)
        except GenerationError as e:
            logger.warning(
                f"⚠️ Stream for {session.conversation_id} stopped after "
                f"{len(full_response)} chars: {e}"
            )

        if not full_response:
            bot_message.text = APOLOGY_TEXT
            _notify(on_update, bot_message)
        return bot_message

    def _build_conversation(
        self,
        session: ChatSession,
        analysis: QueryAnalysis,
    ) -> Conversation:
        stored = self.store.get_conversation(session.conversation_id)
        prior = stored.status if stored is not None else session.status

        return Conversation(
            id=session.conversation_id,
            student_id=session.student_id,
            student_name=session.student_name,
            messages=[m.model_copy() for m in session.messages],
            category=analysis.category,
            sentiment=analysis.sentiment,
            platform=session.platform,
            last_activity=now_ms(),
            status=resolve_status(analysis.sentiment, prior),
        )


def _notify(on_update: Optional[OnUpdate], message: Message) -> None:
    if on_update is not None:
        on_update(message)
