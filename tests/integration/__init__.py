"""Integration tests for components working together as a system.

Coverage:
    - Relay endpoints with real HTTP requests over ASGITransport
    - Stream client talking to the in-process relay
    - Upstream service with patched Agno classes behind the relay

The provider is replaced by a scripted fake upstream or patched Agno
classes, so no API key or network access is required.
"""
