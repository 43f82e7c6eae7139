"""
LLM module - Language model integration.

This module handles all Gemini interactions:
- Prompt construction
- Chat session creation and turns
- Reply parsing
- Error mapping for AI service failures
"""
from src.llm.gateway import GeminiGateway, normalize_url_fields, parse_turn_payload

__all__ = [
    "GeminiGateway",
    "normalize_url_fields",
    "parse_turn_payload",
]
