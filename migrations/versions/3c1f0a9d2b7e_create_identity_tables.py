"""create_identity_tables

Create the identity bridge schema:
- Messaging identities (account <-> messaging identity <-> unique username)
- Messaging credentials (generated homeserver passwords, separate table so
  it can be granted to a narrower role)

Revision ID: 3c1f0a9d2b7e
Revises:
Create Date: 2026-10-19 10:12:44.512301

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c1f0a9d2b7e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # MESSAGING_IDENTITIES table
    # ========================================================================
    op.create_table(
        "messaging_identities",
        sa.Column("account_id", sa.String(255), nullable=False),
        sa.Column("messaging_id", sa.String(255), nullable=False),  # @localpart:domain
        sa.Column("username", sa.String(24), nullable=False),  # Equals the localpart
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("account_id"),
        sa.UniqueConstraint("username", name="uq_messaging_identities_username"),
        sa.CheckConstraint(
            "username ~ '^[a-z0-9=/-][a-z0-9_=./-]{2,23}$'",
            name="messaging_identities_username_format_check",
        ),
    )
    op.create_index(
        "idx_messaging_identities_messaging_id",
        "messaging_identities",
        ["messaging_id"],
    )

    # ========================================================================
    # MESSAGING_CREDENTIALS table
    # ========================================================================
    op.create_table(
        "messaging_credentials",
        sa.Column("account_id", sa.String(255), nullable=False),
        sa.Column("secret", sa.Text(), nullable=False),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("account_id"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("messaging_credentials")
    op.drop_index(
        "idx_messaging_identities_messaging_id", table_name="messaging_identities"
    )
    op.drop_table("messaging_identities")
