"""Create users table

Revision ID: 001
Revises: None
Create Date: 2024-03-02 00:00:00.000000+00:00

What:  Creates the `users` table: auto-increment id, name fields, email and
       bcrypt password hash, plus a unique index on lower(email).

Rollback: downgrade() drops the table (all accounts are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("firstname", sa.String(255), nullable=False),
        sa.Column("lastname", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "password",
            sa.String(255),
            nullable=False,
            comment="bcrypt hash; the plaintext is never stored",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Case-insensitive, matching the lower(email) lookups in the service
    op.create_index("uq_users_email", "users", [sa.text("lower(email)")], unique=True)


def downgrade() -> None:
    op.drop_index("uq_users_email", table_name="users")
    op.drop_table("users")
