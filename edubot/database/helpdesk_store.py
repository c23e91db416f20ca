# edubot/database/helpdesk_store.py

"""
Helpdesk Store - FAQ 与会话记录的持久化

功能：
- FAQ：整表读写（首次读取时使用默认 FAQ）
- Conversation：按 id upsert / 删除 / 更新状态
- reset：清空两张表，恢复初始状态

The store is the only durable owner of both collections. Callers keep
in-memory copies as caches and write back through it after every mutation.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import ValidationError

from edubot.database.local_storage import LocalStorage
from edubot.errors import StorageError
from edubot.model.helpdesk import (
    FAQ,
    Conversation,
    ConversationStatus,
    QueryCategory,
    now_ms,
)

logger = logging.getLogger(__name__)

FAQS_KEY = "faqs"
CONVERSATIONS_KEY = "conversations"

DEFAULT_FAQS: List[FAQ] = [
    FAQ(
        id="1",
        question="How do I apply for admission?",
        answer="You can apply through our online portal at admissions.university.edu.",
        category=QueryCategory.ADMISSIONS,
    ),
    FAQ(
        id="2",
        question="What is the fee for Computer Science?",
        answer="The annual fee for CS is $5,000 per year.",
        category=QueryCategory.FEES,
    ),
    FAQ(
        id="3",
        question="When are the mid-term exams?",
        answer="Mid-term exams usually start in the second week of October.",
        category=QueryCategory.EXAMS,
    ),
]


class HelpdeskStore:
    """FAQ / Conversation 数据仓库"""

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    # =====================================================
    # FAQ
    # =====================================================

    def get_faqs(self) -> List[FAQ]:
        """All FAQs in insertion order; the default set when nothing is stored."""
        records = self._load_records(FAQS_KEY)
        if records is None:
            return [faq.model_copy() for faq in DEFAULT_FAQS]
        return self._parse_list(FAQ, records, FAQS_KEY)

    def save_faqs(self, faqs: List[FAQ]) -> None:
        """Replace the whole FAQ collection."""
        self.storage.set(FAQS_KEY, [f.to_record() for f in faqs])

    # =====================================================
    # Conversation
    # =====================================================

    def get_conversations(self) -> List[Conversation]:
        """All conversations, most recently saved first."""
        raw = self._conversation_records()
        return self._parse_list(Conversation, raw, CONVERSATIONS_KEY)

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        for record in self._conversation_records():
            if record.get("id") == conversation_id:
                return self._parse_list(Conversation, [record], CONVERSATIONS_KEY)[0]
        return None

    def save_conversations(self, conversations: List[Conversation]) -> None:
        """Replace the whole conversation collection."""
        self.storage.set(CONVERSATIONS_KEY, [c.to_record() for c in conversations])

    def save_conversation(self, conversation: Conversation) -> None:
        """
        Upsert by id.

        An existing record is replaced in place (its position is kept);
        a new one is put at the front. Other records are written back
        untouched.
        """
        if not conversation.messages:
            raise ValueError(f"Conversation {conversation.id} has no messages")

        records = self._conversation_records()
        record = conversation.to_record()
        for i, existing in enumerate(records):
            if existing.get("id") == conversation.id:
                records[i] = record
                break
        else:
            records.insert(0, record)

        self.storage.set(CONVERSATIONS_KEY, records)
        logger.info(f"💾 Saved conversation {conversation.id} ({len(conversation.messages)} messages)")

    def delete_conversation(self, conversation_id: str) -> bool:
        """Remove exactly one record. Unknown id → False, nothing written."""
        records = self._conversation_records()
        remaining = [r for r in records if r.get("id") != conversation_id]
        if len(remaining) == len(records):
            return False

        self.storage.set(CONVERSATIONS_KEY, remaining)
        logger.info(f"🗑️ Deleted conversation {conversation_id}")
        return True

    def update_status(
        self,
        conversation_id: str,
        status: ConversationStatus,
    ) -> Optional[Conversation]:
        """Explicit Resolve / Escalate action from the history view."""
        records = self._conversation_records()
        for i, record in enumerate(records):
            if record.get("id") != conversation_id:
                continue
            conv = self._parse_list(Conversation, [record], CONVERSATIONS_KEY)[0]
            conv.status = status
            conv.last_activity = now_ms()
            records[i] = conv.to_record()
            self.storage.set(CONVERSATIONS_KEY, records)
            logger.info(f"📌 Conversation {conversation_id} → {status.value}")
            return conv
        return None

    # =====================================================
    # Reset
    # =====================================================

    def reset(self) -> None:
        """Clear both collections back to their initial state."""
        self.storage.remove(FAQS_KEY)
        self.storage.remove(CONVERSATIONS_KEY)
        logger.info("♻️ Store reset to defaults")

    # =====================================================
    # Helper Methods
    # =====================================================

    def _load_records(self, key: str) -> Optional[List[dict]]:
        """Raw stored records; None when the key was never written."""
        raw = self.storage.get(key)
        if raw is None:
            return None
        if not isinstance(raw, list) or not all(isinstance(r, dict) for r in raw):
            raise StorageError(f"Stored '{key}' is not a list of records")
        return raw

    def _conversation_records(self) -> List[dict]:
        return self._load_records(CONVERSATIONS_KEY) or []

    @staticmethod
    def _parse_list(model, raw: List[dict], key: str) -> list:
        try:
            return [model.model_validate(item) for item in raw]
        except ValidationError as e:
            raise StorageError(f"Stored '{key}' is malformed: {e}") from e
