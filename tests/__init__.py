"""Test package for StreamChat.

Structure:
    - unit/: Individual function and class tests
    - integration/: Relay over ASGI and client-to-relay workflows

No network access is needed: the upstream provider is replaced by a fake
stream or by patched Agno classes. Leverages pytest with pytest-check for
soft assertions.
"""
