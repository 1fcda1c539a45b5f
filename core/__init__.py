from core.browser import open_session

__all__ = [
    "open_session",
]
