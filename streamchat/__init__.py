"""StreamChat - incremental LLM chat streaming over a server-side relay.

Combines FastAPI for HTTP streaming, Agno for the upstream model call,
httpx for the streaming client, NiceGUI for the chat page, and Pydantic
for data validation.

Components:
    - api: relay endpoints (/api/chat, /api/health)
    - relay: upstream provider access and relay configuration
    - client: stream client and conversation state
    - ui: web page driving the stream client
    - models: request schemas and stream framing
"""

__version__ = "0.1.0"
