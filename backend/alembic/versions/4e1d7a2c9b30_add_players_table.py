"""add players table

Revision ID: 4e1d7a2c9b30
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4e1d7a2c9b30"
down_revision = None
branch_labels = None
depends_on = None

CATEGORIES = ("20-30", "35+", "40+", "45+", "50+", "55+")
PLAYING_STYLES = ("OFFENSIVE", "DEFENSIVE", "UNKNOWN")


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("mobile", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("dob", sa.Date(), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("adhar", sa.String(length=32), nullable=True),
        sa.Column(
            "category",
            sa.Enum(*CATEGORIES, name="player_category"),
            nullable=False,
        ),
        sa.Column("player_image_url", sa.String(length=1024), nullable=False),
        sa.Column("valid_document_url", sa.String(length=1024), nullable=True),
        sa.Column("upi_or_barcode", sa.String(length=256), nullable=True),
        sa.Column("payment_screenshot_url", sa.String(length=1024), nullable=True),
        sa.Column("payment_status", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("achievements", sa.String(length=1000), nullable=True),
        sa.Column(
            "playing_style",
            sa.Enum(*PLAYING_STYLES, name="player_playing_style"),
            server_default="UNKNOWN",
            nullable=False,
        ),
        sa.Column("remark", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_players_name"), "players", ["name"])
    op.create_index(op.f("ix_players_mobile"), "players", ["mobile"])
    op.create_index(op.f("ix_players_email"), "players", ["email"])
    op.create_index(op.f("ix_players_age"), "players", ["age"])
    op.create_index(op.f("ix_players_adhar"), "players", ["adhar"])
    op.create_index(op.f("ix_players_category"), "players", ["category"])
    op.create_index(op.f("ix_players_payment_status"), "players", ["payment_status"])
    op.create_index(op.f("ix_players_created_at"), "players", ["created_at"])


def downgrade() -> None:
    op.drop_index(op.f("ix_players_created_at"), table_name="players")
    op.drop_index(op.f("ix_players_payment_status"), table_name="players")
    op.drop_index(op.f("ix_players_category"), table_name="players")
    op.drop_index(op.f("ix_players_adhar"), table_name="players")
    op.drop_index(op.f("ix_players_age"), table_name="players")
    op.drop_index(op.f("ix_players_email"), table_name="players")
    op.drop_index(op.f("ix_players_mobile"), table_name="players")
    op.drop_index(op.f("ix_players_name"), table_name="players")
    op.drop_table("players")

    if op.get_bind().dialect.name == "postgresql":
        sa.Enum(name="player_playing_style").drop(op.get_bind(), checkfirst=True)
        sa.Enum(name="player_category").drop(op.get_bind(), checkfirst=True)
