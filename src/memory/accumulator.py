"""
Form-Data Accumulator - folds each turn's extraction into a session.

Merge rules:
1. PlainText replies pass through untouched.
2. A list of FieldUpdate records is applied in order; records with an
   empty key or value are skipped and later records win.
3. A flat mapping (legacy reply format) is shallow-merged.
4. Anything else passes through untouched.

Keys outside the session's schema are kept. The schema only guides the
extraction prompt.
"""
from typing import Any, Dict

from src.core.logging_config import get_logger
from src.models.turn import PlainText, RawTurnResult, StructuredTurn

logger = get_logger(__name__)


def apply_turn(raw: RawTurnResult, accumulated: Dict[str, Any]) -> RawTurnResult:
    """
    Merge a raw turn result into the accumulated form data.

    Args:
        raw: Result resolved by the gateway for one turn
        accumulated: The session's running form data (mutated in place)

    Returns:
        The raw result for pass-through cases, otherwise a StructuredTurn
        whose form_data is a snapshot of the full accumulated data
    """
    if isinstance(raw, PlainText):
        return raw

    if not isinstance(raw, StructuredTurn):
        return raw

    if isinstance(raw.form_data, list):
        for update in raw.form_data:
            if update.key and update.value:
                accumulated[update.key] = update.value

    elif isinstance(raw.form_data, dict):
        accumulated.update(raw.form_data)

    else:
        return raw

    logger.debug(f"New form data from AI: {raw.form_data}")
    logger.debug(f"Updated accumulated form data: {accumulated}")

    return StructuredTurn(ai_message=raw.ai_message, form_data=dict(accumulated))
