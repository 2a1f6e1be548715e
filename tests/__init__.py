# tests/__init__.py
"""
Test Suite for the layered sample backend.

Organization:
- `shared`: Service registry, configuration and logging.
- `core`: Domain objects and use cases with mocked repositories.
- `adapters`: Persistence context, repositories, registration and the HTTP API
  against a throwaway SQLite database.
"""
