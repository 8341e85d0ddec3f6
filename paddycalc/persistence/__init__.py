"""Session persistence."""

from .session_store import SessionStore, session_from_dict, session_to_dict

__all__ = ["SessionStore", "session_from_dict", "session_to_dict"]
