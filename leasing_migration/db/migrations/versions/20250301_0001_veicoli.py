"""Create the vehicle listings table.

Revision ID: 0001_veicoli
Revises: None
Create Date: 2025-03-01 10:00:00
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_veicoli"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "veicoli",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("sku", sa.Text(), nullable=False),
        sa.Column("titolo", sa.Text(), nullable=True),
        sa.Column("marca", sa.Text(), nullable=True),
        sa.Column("modello", sa.Text(), nullable=True),
        sa.Column("versione", sa.Text(), nullable=True),
        sa.Column("categoria", sa.Text(), nullable=True),
        sa.Column("slug", sa.Text(), nullable=True),
        sa.Column("immagine_url", sa.Text(), nullable=True),
        sa.Column("alimentazione", sa.Text(), nullable=True),
        sa.Column("cambio", sa.Text(), nullable=True),
        sa.Column("canone_mensile", sa.Numeric(10, 2), nullable=True),
        sa.Column("anticipo", sa.Numeric(10, 2), nullable=True),
        sa.Column("durata_mesi", sa.Integer(), nullable=True, server_default=sa.text("48")),
        sa.Column("km_annui", sa.Integer(), nullable=True, server_default=sa.text("10000")),
        sa.Column("noleggio_breve", sa.Boolean(), nullable=True, server_default=sa.text("false")),
        sa.Column("prezzo_giornaliero", sa.Numeric(10, 2), nullable=True),
        sa.Column("km_giornaliero", sa.Integer(), nullable=True),
        sa.Column("prezzo_settimanale", sa.Numeric(10, 2), nullable=True),
        sa.Column("km_settimanale", sa.Integer(), nullable=True),
        sa.Column("prezzo_mensile_breve", sa.Numeric(10, 2), nullable=True),
        sa.Column("km_mensile_breve", sa.Integer(), nullable=True),
        sa.Column("cauzione_richiesta", sa.Numeric(10, 2), nullable=True),
        sa.Column("costo_per_km", sa.Numeric(10, 4), nullable=True),
        sa.Column("promo", sa.Boolean(), nullable=True, server_default=sa.text("false")),
        sa.Column("tempo_consegna", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("sku"),
    )
    op.create_index("ix_veicoli_slug", "veicoli", ["slug"])
    op.create_index("ix_veicoli_marca_categoria", "veicoli", ["marca", "categoria"])


def downgrade() -> None:
    op.drop_index("ix_veicoli_marca_categoria", table_name="veicoli")
    op.drop_index("ix_veicoli_slug", table_name="veicoli")
    op.drop_table("veicoli")
