"""API Layer — FastAPI routes, dependencies, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured {ok, data} / {ok, error} JSON

Design Decisions:
    - Thin routes delegate to services built per request in dependencies.py (ADR: ExMA impureim sandwich)
"""
