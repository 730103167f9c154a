"""Counter Entry ORM — one row per counter store key.

Invariants:
    - key is the primary key; put() overwrites the whole row
    - A row whose expires_at is in the past is treated as absent
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gateway.db.base import Base


class CounterEntry(Base):
    __tablename__ = "counter_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )
