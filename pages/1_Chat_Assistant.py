# pages/1_Chat_Assistant.py

"""
聊天页面

- 与 EduBot 对话（可选流式输出）
- 每次问答后自动保存会话
"""

import asyncio
from datetime import datetime

import streamlit as st

from edubot.config import Config
from edubot.errors import SessionBusyError
from edubot.model.helpdesk import Message, MessageRole
from edubot.resources import get_chat_service
from edubot.service.chat_service import ChatService, ChatSession, ExchangeMode


# ======================================================
# Helper functions
# ======================================================

def _get_session(service: ChatService) -> ChatSession:
    if "chat_session" not in st.session_state:
        st.session_state.chat_session = service.open_session(
            student_id=Config.chat.student_id,
            student_name=Config.chat.student_name,
        )
    return st.session_state.chat_session


def _format_time(message: Message) -> str:
    return datetime.fromtimestamp(message.timestamp / 1000).strftime("%H:%M")


def _render_message(message: Message):
    role = "user" if message.role is MessageRole.USER else "assistant"
    with st.chat_message(role):
        st.markdown(message.text)
        st.caption(_format_time(message))


def _run_exchange(service: ChatService, session: ChatSession, prompt: str, mode: ExchangeMode):
    with st.chat_message("user"):
        st.markdown(prompt)

    with st.chat_message("assistant"):
        placeholder = st.empty()
        placeholder.markdown("_Thinking..._")

        def on_update(message: Message):
            if message.role is MessageRole.BOT:
                placeholder.markdown(message.text or "▌")

        try:
            conversation = asyncio.run(
                service.submit_query(session, prompt, mode=mode, on_update=on_update)
            )
        except SessionBusyError:
            placeholder.warning("Please wait for the current reply to finish.")
            return

    if conversation is not None:
        st.caption(
            f"🏷️ {conversation.category.value} · "
            f"{conversation.sentiment.value} · {conversation.status.value}"
        )


# ======================================================
# Main UI
# ======================================================

def main():
    st.set_page_config(
        page_title="Chat Assistant – EduBot",
        layout="wide",
        page_icon="🤖",
    )

    st.title("🤖 EduBot Assistant")
    st.caption("Always here to help. Try asking about admissions or fees.")

    service = get_chat_service()
    session = _get_session(service)

    with st.sidebar:
        streaming = st.toggle("Stream replies", value=True, key="chat_streaming")
        if st.button("🆕 New conversation", use_container_width=True):
            del st.session_state.chat_session
            st.rerun()
        st.caption(f"Conversation `{session.conversation_id}`")

    if not session.messages:
        st.info("👋 How can I assist you today?")

    for message in session.messages:
        _render_message(message)

    prompt = st.chat_input("Type your question...", disabled=session.in_flight)
    if prompt:
        mode = ExchangeMode.STREAMING if streaming else ExchangeMode.SYNC
        _run_exchange(service, session, prompt, mode)


if __name__ == "__main__":
    main()
