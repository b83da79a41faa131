"""Server side of the streaming pipeline.

Opens streamed completion calls to the model provider with a server-held
credential and exposes them as ordered text increments.

Responsibilities:
    - Relay configuration from environment (.env supported)
    - Default-model substitution for unknown identifiers
    - Upstream streaming through the Agno framework
    - UpstreamError reporting for the HTTP layer

Maintains clean separation from the HTTP layer.
"""

from streamchat.relay.config import RelayConfig, get_relay_config, resolve_model
from streamchat.relay.upstream import UpstreamError, UpstreamService, get_upstream_service

__all__ = [
    "RelayConfig",
    "UpstreamError",
    "UpstreamService",
    "get_relay_config",
    "get_upstream_service",
    "resolve_model",
]
