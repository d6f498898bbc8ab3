"""Integration tests for components working together as a system.

Coverage:
    - ChatSession exchanges over httpx MockTransport with crafted streams
    - API endpoint with a stubbed agent service
    - ChatSession talking to the real FastAPI app through ASGITransport

No live LLM calls; the agent service is replaced through FastAPI
dependency overrides.
"""
