"""
Unit Tests

Unit tests run in isolation without external dependencies. The analytics
services are pure functions over in-memory records, and the API is
exercised through FastAPI's TestClient.
"""
