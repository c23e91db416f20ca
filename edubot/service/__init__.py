"""
Helpdesk services

- llm_service: language-model gateway (litellm)
- chat_service: one question/answer exchange per call
- knowledge_base: FAQ CRUD
- webhook_simulator: fake WhatsApp / Facebook inbound messages
- analytics_service / history_service: dashboard and history views
"""
