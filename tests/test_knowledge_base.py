from edubot.model.helpdesk import QueryCategory


def test_add_rejects_blank_fields(knowledge_base, store):
    assert knowledge_base.add("", "answer") is None
    assert knowledge_base.add("question", "   ") is None

    # nothing written, defaults still served
    assert store.storage.get("faqs") is None
    assert len(knowledge_base.list()) == 3


def test_add_appends_and_persists(knowledge_base, store):
    faq = knowledge_base.add("  How do I access the library?  ", "With your student card.", QueryCategory.ACADEMICS)

    assert faq.question == "How do I access the library?"
    faqs = store.get_faqs()
    assert [f.id for f in faqs] == ["1", "2", "3", faq.id]
    assert faqs[-1].category is QueryCategory.ACADEMICS


def test_remove(knowledge_base):
    assert knowledge_base.remove("2") is True
    assert [f.id for f in knowledge_base.list()] == ["1", "3"]
    assert knowledge_base.remove("2") is False


def test_context_text_formats_question_answer_pairs(knowledge_base, store):
    store.save_faqs([])
    knowledge_base.add("Q1?", "A1.")
    knowledge_base.add("Q2?", "A2.")

    assert knowledge_base.context_text() == "Q: Q1?\nA: A1.\n---\nQ: Q2?\nA: A2."
