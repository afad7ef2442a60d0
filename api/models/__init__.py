"""Pydantic schemas for every admin API entity, request and response."""
