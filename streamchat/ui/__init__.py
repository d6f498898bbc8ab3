"""NiceGUI interface - thin presentation layer for chat sessions.

Responsibilities:
    - Chat bubbles with typing playback of streamed replies
    - Waiting indicator while a request is pending
    - New session, delete session and copy-response commands
    - Markdown rendering with sanitized HTML output

Contains no exchange logic. Implements the session Presenter and delegates
every command to the ChatSession.
"""
