"""FastAPI endpoints for the chat backend.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Conversation in, streamed reply out (SSE)
"""

from streamchat.api.app import app, create_app

__all__ = ["app", "create_app"]
