# edubot/errors.py

"""Exceptions raised by the helpdesk services."""


class HelpdeskError(Exception):
    """Base class for all helpdesk errors."""


class StorageError(HelpdeskError):
    """Reading or writing the local store failed."""


class SessionBusyError(HelpdeskError):
    """A second exchange was submitted while one is still in flight."""

    def __init__(self, conversation_id: str):
        super().__init__(f"Conversation {conversation_id} already has an exchange in flight")
        self.conversation_id = conversation_id


class GenerationError(HelpdeskError):
    """The language model failed while producing a streamed answer."""
