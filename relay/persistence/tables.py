"""SQLAlchemy table definitions for the identity bridge.

These table definitions are used for Core queries.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP

# Metadata object for all tables
metadata = MetaData()

USERNAME_UNIQUE_CONSTRAINT = "uq_messaging_identities_username"

# ============================================================================
# MESSAGING IDENTITIES TABLE (account <-> messaging identity <-> username)
# ============================================================================
messaging_identities_table = Table(
    "messaging_identities",
    metadata,
    Column("account_id", String(255), primary_key=True),  # External auth account
    Column("messaging_id", String(255), nullable=False),  # @localpart:domain
    Column("username", String(24), nullable=False),  # Equals the localpart
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("username", name=USERNAME_UNIQUE_CONSTRAINT),
    CheckConstraint(
        "username ~ '^[a-z0-9=/-][a-z0-9_=./-]{2,23}$'",
        name="messaging_identities_username_format_check",
    ),
)

Index("idx_messaging_identities_messaging_id", messaging_identities_table.c.messaging_id)

# ============================================================================
# MESSAGING CREDENTIALS TABLE (kept apart for a narrower grant)
# ============================================================================
messaging_credentials_table = Table(
    "messaging_credentials",
    metadata,
    Column("account_id", String(255), primary_key=True),
    Column("secret", Text, nullable=False),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)
