"""Test package for StreamChat.

Unit tests cover each pipeline stage and session component in isolation;
integration tests drive a ChatSession over HTTP transports and the FastAPI
endpoint end to end.

Structure:
    - unit/: Individual function and class tests
    - integration/: Controller, API and end-to-end workflow tests

Leverages pytest with pytest-asyncio (auto mode) and pytest-check for soft
assertions.
"""
