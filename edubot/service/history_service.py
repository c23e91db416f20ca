# edubot/service/history_service.py

"""
History Service - 会话历史浏览

搜索 / 按渠道、状态筛选，以及 Resolve / Escalate / Delete 操作。
"""

from typing import List, Optional

from edubot.database.helpdesk_store import HelpdeskStore
from edubot.model.helpdesk import Conversation, ConversationStatus, Platform


def _matches(conv: Conversation, search: str) -> bool:
    blob = " ".join(
        [conv.student_name, conv.category.value]
        + [m.text for m in conv.messages]
    ).lower()
    return search in blob


class HistoryService:

    def __init__(self, store: HelpdeskStore):
        self.store = store

    def list(
        self,
        search: str = "",
        platform: Optional[Platform] = None,
        status: Optional[ConversationStatus] = None,
    ) -> List[Conversation]:
        search = (search or "").strip().lower()

        filtered = []
        for conv in self.store.get_conversations():
            if platform is not None and conv.platform is not platform:
                continue
            if status is not None and conv.status is not status:
                continue
            if search and not _matches(conv, search):
                continue
            filtered.append(conv)
        return filtered

    def resolve(self, conversation_id: str) -> Optional[Conversation]:
        return self.store.update_status(conversation_id, ConversationStatus.RESOLVED)

    def escalate(self, conversation_id: str) -> Optional[Conversation]:
        return self.store.update_status(conversation_id, ConversationStatus.ESCALATED)

    def delete(self, conversation_id: str) -> bool:
        return self.store.delete_conversation(conversation_id)
