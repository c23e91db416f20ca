# pages/3_Knowledge_Base.py

"""
知识库（FAQ）管理

- 新增 / 删除 FAQ
- System Reset：清空会话，FAQ 恢复默认
"""

import streamlit as st

from edubot.model.helpdesk import QueryCategory
from edubot.resources import get_knowledge_base, get_simulator, get_store


def _render_add_form(kb):
    with st.expander("➕ Add New Entry", expanded=False):
        with st.form("add_faq", clear_on_submit=True):
            category = st.selectbox(
                "Target Department",
                options=list(QueryCategory),
                index=list(QueryCategory).index(QueryCategory.OTHER),
                format_func=lambda c: c.value,
            )
            question = st.text_input("Common Question", placeholder="e.g. How do I access the library?")
            answer = st.text_area(
                "Grounding Answer",
                placeholder="Provide the specific info the AI should use as a source...",
            )
            if st.form_submit_button("Publish to Knowledge Base", type="primary"):
                if kb.add(question, answer, category) is None:
                    st.warning("Question and answer are both required.")
                else:
                    st.success("Published.")


def _render_reset():
    with st.popover("♻️ System Reset"):
        st.markdown("⚠️ **This will clear all conversations and reset FAQs to default.**")
        if st.button("Reset everything", key="do_reset", type="primary"):
            get_store().reset()
            get_simulator().clear_events()
            st.session_state.clear()
            st.rerun()


def main():
    st.set_page_config(
        page_title="Knowledge Base – EduBot",
        layout="wide",
        page_icon="📚",
    )

    col_title, col_reset = st.columns([5, 1])
    with col_title:
        st.title("📚 Knowledge Base")
        st.caption("Define how the AI responds to common student queries")
    with col_reset:
        _render_reset()

    kb = get_knowledge_base()
    _render_add_form(kb)

    faqs = kb.list()
    if not faqs:
        st.info("The knowledge base is empty.")
        return

    cols = st.columns(3)
    for i, faq in enumerate(faqs):
        with cols[i % 3]:
            with st.container(border=True):
                st.caption(f"`{faq.category.value}`")
                st.markdown(f"**\"{faq.question}\"**")
                st.markdown(f"_{faq.answer}_")
                if st.button("🗑️ Delete", key=f"delete_faq_{faq.id}"):
                    kb.remove(faq.id)
                    st.rerun()


if __name__ == "__main__":
    main()
