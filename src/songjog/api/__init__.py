"""API layer: canonical query/transform surface for presentation and export.

Key rules:

1. No network or file I/O - callers hand in already-fetched payloads
2. Filtering and sorting never mutate their input lists
3. Return Pydantic models or composition wrappers only
"""
