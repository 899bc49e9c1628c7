"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (dashboard input, API responses)
    - Wire names are camelCase to match the dashboard and the enhanced service

Design Decisions:
    - Separate from domain types: schemas are API contracts, domain types are internal (ADR: DDD boundary)
"""
