"""HTTP request/response schemas (pydantic)."""
