# app.py
import streamlit as st

from edubot.config import Config
from edubot.model.helpdesk import ConversationStatus, Platform
from edubot.resources import get_store
from edubot.service.analytics_service import compute_analytics, platform_share


# =====================================================
# Helper functions (UI-level logic only)
# =====================================================

def _chart_data(items, label: str) -> dict:
    return {
        label: [item.name for item in items],
        "Queries": [item.value for item in items],
    }


def _render_metrics(analytics, conversations):
    escalated = sum(1 for c in conversations if c.status is ConversationStatus.ESCALATED)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric(label="💬 Total Queries", value=analytics.total_queries)
    with col2:
        st.metric(label="✅ Resolved Rate", value=f"{analytics.resolved_rate}%")
    with col3:
        st.metric(
            label="🚨 Escalated",
            value=escalated,
            help="Conversations escalated automatically (negative sentiment) or by staff",
        )
    with col4:
        st.metric(label="📡 Active Channels", value=len(Platform))


def _render_channels(analytics):
    st.subheader("Channel Distribution")
    shares = platform_share(analytics)

    cols = st.columns(len(shares))
    for col, (platform, pct) in zip(cols, shares.items()):
        with col:
            st.markdown(f"**{platform.value}** · {pct}%")
            st.progress(pct / 100)


# =====================================================
# Main UI
# =====================================================

def main():
    st.set_page_config(
        page_title="EduBot – Dashboard",
        page_icon="🎓",
        layout="wide",
    )

    st.title(f"🎓 EduBot — {Config.university_name} Helpdesk")
    st.caption("Conversation analytics across web chat, WhatsApp and Facebook")

    store = get_store()
    conversations = store.get_conversations()
    analytics = compute_analytics(conversations)

    _render_metrics(analytics, conversations)
    st.divider()

    if not conversations:
        st.info("No conversations yet. Start one from the Chat Assistant or the Integration Simulator.")
        st.stop()

    col_cat, col_sent = st.columns(2)

    with col_cat:
        st.subheader("📁 Query Categories")
        st.bar_chart(
            _chart_data(analytics.category_distribution, "Category"),
            x="Category",
            y="Queries",
        )

    with col_sent:
        st.subheader("😊 Sentiment Breakdown")
        st.bar_chart(
            _chart_data(analytics.sentiment_distribution, "Sentiment"),
            x="Sentiment",
            y="Queries",
        )

    _render_channels(analytics)

    st.subheader("📅 Queries per Day")
    st.line_chart(
        {
            "Date": [d.day.isoformat() for d in analytics.queries_per_day],
            "Queries": [d.count for d in analytics.queries_per_day],
        },
        x="Date",
        y="Queries",
    )


if __name__ == "__main__":
    main()
