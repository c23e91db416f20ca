from .local_storage import LocalStorage
from .helpdesk_store import DEFAULT_FAQS, HelpdeskStore

__all__ = ["LocalStorage", "HelpdeskStore", "DEFAULT_FAQS"]
