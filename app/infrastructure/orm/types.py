"""Column types shared by the ORM models"""

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JsonDocument = JSON().with_variant(JSONB(), "postgresql")
