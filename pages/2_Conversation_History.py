# pages/2_Conversation_History.py

"""
会话历史

- 搜索 / 按渠道、状态筛选
- 查看会话详情
- Resolve / Escalate / Delete
"""

from datetime import datetime
from typing import Optional

import streamlit as st

from edubot.model.helpdesk import (
    Conversation,
    ConversationStatus,
    MessageRole,
    Platform,
    Sentiment,
)
from edubot.resources import get_history_service
from edubot.service.history_service import HistoryService

SENTIMENT_BADGE = {
    Sentiment.POSITIVE: "🟢",
    Sentiment.NEUTRAL: "⚪",
    Sentiment.NEGATIVE: "🔴",
}

STATUS_BADGE = {
    ConversationStatus.OPEN: "🟡 Open",
    ConversationStatus.RESOLVED: "✅ Resolved",
    ConversationStatus.ESCALATED: "🚨 Escalated",
}


def _format_ms(ms: int, fmt: str = "%Y-%m-%d %H:%M") -> str:
    return datetime.fromtimestamp(ms / 1000).strftime(fmt)


def _render_list(conversations, selected_id: Optional[str]):
    for conv in conversations:
        last = conv.last_message
        preview = (last.text[:60] + "...") if last and len(last.text) > 60 else (last.text if last else "No messages")

        with st.container(border=True):
            st.markdown(f"**{conv.student_name}** · {_format_ms(conv.last_activity, '%Y-%m-%d')}")
            st.caption(preview)
            st.caption(f"`{conv.platform.value}` `{conv.category.value}` {STATUS_BADGE[conv.status]}")
            if st.button(
                "Open" if conv.id != selected_id else "▶ Viewing",
                key=f"select_{conv.id}",
                use_container_width=True,
                type="primary" if conv.id == selected_id else "secondary",
            ):
                st.session_state.selected_conversation = conv.id
                st.rerun()


def _render_detail(conv: Conversation, service: HistoryService):
    col_info, col_actions = st.columns([3, 2])

    with col_info:
        st.subheader(conv.student_name)
        st.caption(
            f"{SENTIMENT_BADGE[conv.sentiment]} {conv.sentiment.value} Sentiment · "
            f"Platform: **{conv.platform.value}** · {STATUS_BADGE[conv.status]}"
        )

    with col_actions:
        c1, c2, c3 = st.columns(3)
        with c1:
            if st.button(
                "Mark Resolved",
                key="resolve",
                disabled=conv.status is ConversationStatus.RESOLVED,
                use_container_width=True,
            ):
                service.resolve(conv.id)
                st.rerun()
        with c2:
            if st.button(
                "Escalate",
                key="escalate",
                disabled=conv.status is ConversationStatus.ESCALATED,
                use_container_width=True,
            ):
                service.escalate(conv.id)
                st.rerun()
        with c3:
            with st.popover("🗑️", use_container_width=True):
                st.markdown("⚠️ **Delete this conversation?**")
                if st.button("Delete", key="delete", type="primary"):
                    service.delete(conv.id)
                    st.session_state.selected_conversation = None
                    st.rerun()

    st.divider()

    for m in conv.messages:
        with st.chat_message("user" if m.role is MessageRole.USER else "assistant"):
            st.markdown(m.text)
            st.caption(_format_ms(m.timestamp, "%H:%M:%S"))


def main():
    st.set_page_config(
        page_title="Conversation History – EduBot",
        layout="wide",
        page_icon="🗂️",
    )

    st.title("🗂️ Conversation History")

    service = get_history_service()

    if "selected_conversation" not in st.session_state:
        st.session_state.selected_conversation = None

    col_search, col_platform, col_status = st.columns([2.2, 1, 1])
    with col_search:
        search = st.text_input("🔍 Search conversations", placeholder="Name, category or message text...")
    with col_platform:
        platform = st.selectbox(
            "Platform",
            options=[None] + list(Platform),
            format_func=lambda p: "All" if p is None else p.value,
        )
    with col_status:
        status = st.selectbox(
            "Status",
            options=[None] + list(ConversationStatus),
            format_func=lambda s: "All" if s is None else s.value,
        )

    conversations = service.list(search=search, platform=platform, status=status)

    col_list, col_detail = st.columns([1, 2])

    with col_list:
        if not conversations:
            st.info("No conversations found")
        else:
            _render_list(conversations, st.session_state.selected_conversation)

    with col_detail:
        selected = next(
            (c for c in conversations if c.id == st.session_state.selected_conversation),
            None,
        )
        if selected is None:
            st.info("💬 Select a conversation to view details")
        else:
            _render_detail(selected, service)


if __name__ == "__main__":
    main()
