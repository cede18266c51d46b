"""Host framework integrations.

- fastapi: wraps FastAPI's OpenAPI generation with the example filters
"""
