"""
Memory Package - In-process form session state.

Sessions live only in process memory and are lost on restart.

Example:
    >>> from src.memory import SessionStore
    >>> store = SessionStore(gateway)
    >>> session_id = store.create({"name": "string"})
    >>> store.has(session_id)
    True
"""
from src.memory.accumulator import apply_turn
from src.memory.session import FormSession
from src.memory.store import SessionStore

__all__ = [
    "apply_turn",
    "FormSession",
    "SessionStore",
]
