# pages/4_Integration_Simulator.py

"""
渠道集成模拟

模拟 WhatsApp / Facebook 的 webhook 消息，查看事件日志。
"""

import asyncio

import streamlit as st

from edubot.model.helpdesk import Platform, WebhookDirection
from edubot.resources import get_simulator
from edubot.service.webhook_simulator import CHANNELS

ICONS = {
    Platform.WHATSAPP: "💬",
    Platform.FACEBOOK: "Ⓜ️",
}


def _render_logs(events):
    st.markdown("#### Event Logs")
    if not events:
        st.caption("No active event logs. Simulate a message to see the lifecycle.")
        return

    for event in reversed(events):
        if event.direction is WebhookDirection.INCOMING:
            st.code(f"WEBHOOK_INCOMING  {event.time:%H:%M:%S}\n> REC: {event.text}", language=None)
        else:
            st.code(f"WEBHOOK_OUTGOING  {event.time:%H:%M:%S}\n< SENT: {event.text}", language=None)


def main():
    st.set_page_config(
        page_title="Integration Simulator – EduBot",
        layout="wide",
        page_icon="🔌",
    )

    st.title("🔌 Integration Simulator")
    st.caption("Mimics real messaging-platform webhook events, processed locally")

    simulator = get_simulator()

    col_form, col_logs = st.columns(2)

    with col_form:
        platform = st.radio(
            "Platform",
            options=list(CHANNELS),
            format_func=lambda p: f"{ICONS[p]} {p.value}",
            horizontal=True,
        )
        with st.form("webhook", clear_on_submit=True):
            text = st.text_input(
                "Incoming Message Text",
                placeholder=f"Send a message as a student via {platform.value}...",
            )
            submitted = st.form_submit_button(f"Simulate {platform.value} Message", type="primary")

        if submitted:
            with st.spinner("Triggering webhook..."):
                conversation = asyncio.run(simulator.simulate(platform, text))
            if conversation is None:
                st.warning("Message text is required.")
            else:
                st.success(
                    f"Saved `{conversation.id}` · {conversation.category.value} · "
                    f"{conversation.sentiment.value}"
                )

        if st.button("🧹 Clear logs"):
            simulator.clear_events()
            st.rerun()

    with col_logs:
        _render_logs(simulator.events)


if __name__ == "__main__":
    main()
