"""FastAPI relay for the streaming chat pipeline.

Endpoints:
    - GET /api/health: Service health status
    - POST /api/chat: Streamed chat completion relay
"""

from streamchat.api.app import app, create_app

__all__ = ["app", "create_app"]
