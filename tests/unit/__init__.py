"""Unit tests for individual components in isolation.

Coverage:
    - streaming/: frame decoding, event extraction, playback scheduling
    - session/: history, storage, configuration
    - ui/: markdown rendering and sanitization
    - agent/: agent configuration and message preparation

Uses mocks for external services when needed.
"""
