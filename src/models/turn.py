"""
Turn result types exchanged between the gateway, the store and the
transport layer.

The AI service replies either with free text or with a structured object
carrying a conversational message and the fields it extracted. The
gateway resolves the raw payload into one of these variants once, so
nothing downstream has to inspect untyped JSON again.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class FieldUpdate:
    """A single field extracted from one conversation turn."""
    key: str
    value: Any


@dataclass(frozen=True)
class PlainText:
    """Free-text reply with no extraction attached."""
    text: str


@dataclass
class StructuredTurn:
    """
    Structured reply: a message for the user plus extracted form data.

    Attributes:
        ai_message: Conversational reply shown to the user
        form_data: One of
            - a list of FieldUpdate (current reply format)
            - a flat mapping of key -> value (legacy reply format,
              also the shape returned after accumulation)
            - None when the reply carried no recognizable form data
    """
    ai_message: str
    form_data: Union[List[FieldUpdate], Dict[str, Any], None] = field(default_factory=list)


RawTurnResult = Union[PlainText, StructuredTurn]


def response_text(result: RawTurnResult) -> str:
    """Text to show the user for a turn result."""
    if isinstance(result, PlainText):
        return result.text
    return result.ai_message


def response_form_data(result: RawTurnResult) -> Dict[str, Any]:
    """Accumulated form data carried by a turn result ({} when absent)."""
    if isinstance(result, StructuredTurn) and isinstance(result.form_data, dict):
        return dict(result.form_data)
    return {}


def to_payload(result: RawTurnResult) -> Optional[Dict[str, Any]]:
    """JSON-friendly form of a structured result (None for plain text)."""
    if isinstance(result, PlainText):
        return None
    form_data = result.form_data
    if isinstance(form_data, list):
        form_data = [{"key": f.key, "value": f.value} for f in form_data]
    return {"ai_message": result.ai_message, "form_data": form_data}
