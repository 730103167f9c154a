"""ORM Models — SQLAlchemy declarative models for persisted gateway state.

Invariants:
    - All models inherit from Base (db/base.py)
    - Rows are written by infrastructure stores only

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from gateway.models.counter_entry import CounterEntry  # noqa: F401
from gateway.models.analytics_event import AnalyticsEventRow  # noqa: F401
from gateway.models.contact_submission import ContactSubmission  # noqa: F401
