"""Root conftest — shared test configuration."""

import os

# Never touch a real database or email account from tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("COUNTER_STORE_BACKEND", "memory")
os.environ.setdefault("ANALYTICS_SINK_BACKEND", "memory")
os.environ.setdefault("SUBMISSION_SINK_BACKEND", "log")
os.environ["RESEND_API_KEY"] = ""
