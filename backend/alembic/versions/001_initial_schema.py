"""Initial schema

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(100), nullable=False),
        sa.Column("fullname", sa.String(100), nullable=False),
        sa.Column("role", sa.String(10), nullable=False, server_default="READER"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Locations table
    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("star_system", sa.String(100), nullable=False),
        sa.Column("area", sa.String(100), nullable=False),
    )

    # Empires table
    op.create_table(
        "empires",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slogan", sa.String(100), nullable=False),
        sa.Column("location_id", sa.Integer(), sa.ForeignKey("locations.id"), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
    )
    op.create_index("ix_empires_location_id", "empires", ["location_id"])


def downgrade() -> None:
    op.drop_index("ix_empires_location_id", table_name="empires")
    op.drop_table("empires")
    op.drop_table("locations")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
