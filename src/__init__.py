"""
Source code root package.

This package contains all application source code organized by responsibility:
- api/       : FastAPI app, HTTP routes and the WebSocket channel
- core/      : Configuration, logging, errors, validation, audit middleware
- services/  : Business logic and orchestration
- llm/       : Gemini integration and prompt management
- memory/    : In-memory form sessions and form-data accumulation
- models/    : Turn results, event payloads and HTTP response schemas
"""
