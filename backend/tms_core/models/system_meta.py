"""SystemMeta ORM — generic string-key/string-value rows for deployment-wide state.

Invariants:
    - key is the primary key: at most one row per logical key (unique constraint
      is what makes create-if-absent safe across processes)
    - value is non-nullable; "absent" is modelled by the row not existing
    - Rows are owned by the deployment, never by a user or request

Design Decisions:
    - Text values, not JSON: every stored value (instance id, tokens, ISO timestamps) is a string
    - updated_at for operators only; no logic reads it
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from tms_core.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SystemMeta(Base):
    """One persisted key/value pair."""
    __tablename__ = "system_meta"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )
