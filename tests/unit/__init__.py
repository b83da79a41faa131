"""Unit tests for individual components in isolation.

Coverage:
    - models/: Request validation and stream trailer framing
    - relay/: Configuration, model substitution, upstream event handling
    - client/: Decoder, conversation state, stream client over MockTransport

Uses mocks for external services when needed.
"""
