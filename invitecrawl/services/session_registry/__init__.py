from .models import SessionRecord, SessionHandle
from .registry import InMemorySessionRegistry

__all__ = ["SessionRecord", "SessionHandle", "InMemorySessionRegistry"]
