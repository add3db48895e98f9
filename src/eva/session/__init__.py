"""Session helpers for EVA."""

from .models import Message
from .store import Session, SessionStore

__all__ = ["Message", "Session", "SessionStore"]
