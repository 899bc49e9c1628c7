"""ORM Models — SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all or
      alembic autogenerate runs (ADR: standard SQLAlchemy pattern)
"""

from tms_core.models.system_meta import SystemMeta  # noqa: F401
