"""
Prompts module - LLM prompt templates.

Prompts are stored as separate Python files so prompt changes show up
clearly in version control.
"""
from src.llm.prompts.form_prompts import (
    FALLBACK_MESSAGE,
    GREETING_MESSAGE,
    SEED_USER_MESSAGE,
    get_form_system_prompt,
)

__all__ = [
    "FALLBACK_MESSAGE",
    "GREETING_MESSAGE",
    "SEED_USER_MESSAGE",
    "get_form_system_prompt",
]
