"""EduBot: university helpdesk dashboard."""

__version__ = "0.1.0"
