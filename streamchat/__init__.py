"""StreamChat - incremental streaming chat client for language-model backends.

Combines httpx for streamed HTTP responses, NiceGUI for the chat page,
FastAPI + Agno for the backend endpoint, and Pydantic for data validation.

Components:
    - streaming: byte-to-line decoding, frame event extraction, typing playback
    - session: exchange state machine, conversation history, durable storage
    - ui: NiceGUI presentation and markdown rendering
    - api: HTTP endpoint streaming model output as server-sent events
    - agent: upstream model access
    - models: request/response schemas
"""

__version__ = "0.1.0"
