"""Enums and pydantic schemas shared across the engine."""
