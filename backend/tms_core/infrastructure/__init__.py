"""Infrastructure Layer — database access, the enhanced-service HTTP client, logging.

Invariants:
    - All external calls bounded by a timeout and mapped to typed errors
    - SQLAlchemy failures surface as DatabaseError, httpx failures as EnhancedServiceError

Design Decisions:
    - Thin wrappers over raw clients (ADR: ExMA single responsibility)
"""
