# edubot/resources.py

"""
Process-wide singletons for the Streamlit pages (cached across reruns).

The store is built once here and handed to every service explicitly.
"""

import streamlit as st

from edubot.config import Config
from edubot.database.helpdesk_store import HelpdeskStore
from edubot.database.local_storage import LocalStorage
from edubot.log import setup_logging
from edubot.service.chat_service import ChatService
from edubot.service.history_service import HistoryService
from edubot.service.knowledge_base import KnowledgeBase
from edubot.service.llm_service import LiteLLMGateway, init_litellm
from edubot.service.webhook_simulator import WebhookSimulator


@st.cache_resource
def get_store() -> HelpdeskStore:
    """
    Local JSON store (FAQs + conversations).
    """
    setup_logging(log_file=Config.log_file)
    storage = LocalStorage(Config.storage.root, namespace=Config.storage.namespace)
    return HelpdeskStore(storage)


@st.cache_resource
def get_llm() -> LiteLLMGateway:
    init_litellm()
    return LiteLLMGateway(Config.llm, Config.university_name)


@st.cache_resource
def get_knowledge_base() -> KnowledgeBase:
    return KnowledgeBase(get_store())


@st.cache_resource
def get_chat_service() -> ChatService:
    return ChatService(get_store(), get_llm(), get_knowledge_base())


@st.cache_resource
def get_history_service() -> HistoryService:
    return HistoryService(get_store())


@st.cache_resource
def get_simulator() -> WebhookSimulator:
    """
    Webhook simulator; its event log lives as long as the server process.
    """
    return WebhookSimulator(get_chat_service())
