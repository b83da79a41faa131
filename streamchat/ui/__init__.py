"""NiceGUI interface - thin visualization layer over the stream client.

Responsibilities:
    - Model selector and system prompt field
    - Message list with live-growing assistant turn
    - Error banner and clear button

Contains no streaming logic; redraws from the client's ConversationState.
"""
