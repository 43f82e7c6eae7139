"""
Form session record.

A FormSession owns its conversation handle: the handle is created for
the session and dropped together with it.
"""
import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping


@dataclass
class FormSession:
    """
    State for one form-filling conversation.

    Attributes:
        id: Unique session identifier (UUID4 string)
        schema: Read-only field name -> type tag mapping
        conversation: Opaque conversation handle from the gateway
        created_at: Creation time (timezone-aware, UTC)
        form_data: Accumulated key -> latest value
        lock: Serializes turns for this session
    """
    id: str
    schema: Mapping[str, str]
    conversation: Any
    created_at: datetime
    form_data: Dict[str, Any] = field(default_factory=dict)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def __post_init__(self):
        if not isinstance(self.schema, MappingProxyType):
            self.schema = MappingProxyType(dict(self.schema))

    def age_minutes(self, now: datetime) -> float:
        """Minutes elapsed since creation."""
        return (now - self.created_at).total_seconds() / 60

    def get_summary(self) -> Dict[str, Any]:
        """
        Snapshot of this session for callers outside the store.

        Copies are returned so callers cannot mutate internal state.
        """
        return {
            "session_id": self.id,
            "schema": dict(self.schema),
            "created_at": self.created_at.isoformat(),
            "form_data": dict(self.form_data),
        }
