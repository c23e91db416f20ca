# edubot/service/knowledge_base.py

"""
Knowledge Base - FAQ 管理

Every mutation writes the full FAQ collection back to the store
(replace-all, last writer wins).
"""

import logging
from typing import List, Optional

from edubot.database.helpdesk_store import HelpdeskStore
from edubot.model.helpdesk import FAQ, QueryCategory

logger = logging.getLogger(__name__)


def format_faq_context(faqs: List[FAQ]) -> str:
    """Q/A pairs used as grounding text for the model."""
    return "\n---\n".join(f"Q: {f.question}\nA: {f.answer}" for f in faqs)


class KnowledgeBase:
    """FAQ CRUD on top of the helpdesk store"""

    def __init__(self, store: HelpdeskStore):
        self.store = store

    def list(self) -> List[FAQ]:
        return self.store.get_faqs()

    def add(
        self,
        question: str,
        answer: str,
        category: QueryCategory = QueryCategory.OTHER,
    ) -> Optional[FAQ]:
        """
        Add a new entry.

        Blank question or answer → None, nothing is written.
        """
        question = (question or "").strip()
        answer = (answer or "").strip()
        if not question or not answer:
            return None

        faq = FAQ(question=question, answer=answer, category=category)
        faqs = self.store.get_faqs()
        faqs.append(faq)
        self.store.save_faqs(faqs)
        logger.info(f"📚 FAQ added: {faq.id} [{faq.category.value}]")
        return faq

    def remove(self, faq_id: str) -> bool:
        faqs = self.store.get_faqs()
        remaining = [f for f in faqs if f.id != faq_id]
        if len(remaining) == len(faqs):
            return False

        self.store.save_faqs(remaining)
        logger.info(f"🗑️ FAQ removed: {faq_id}")
        return True

    def context_text(self) -> str:
        return format_faq_context(self.store.get_faqs())
