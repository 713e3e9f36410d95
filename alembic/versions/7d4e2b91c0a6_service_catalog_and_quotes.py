"""service_catalog_and_quotes

Revision ID: 7d4e2b91c0a6
Revises: 3c1a9e07b5d2
Create Date: 2026-10-20 14:03:27.518902

Adds services, quotes and quote_lines. Tables that already exist are left
untouched.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '7d4e2b91c0a6'
down_revision: Union[str, None] = '3c1a9e07b5d2'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('services'):
        op.create_table('services',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=200), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('category', sa.String(length=100), nullable=False),
            sa.Column('base_price', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('estimated_days', sa.Integer(), nullable=True),
            sa.Column('available', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_services_id'), 'services', ['id'], unique=False)
        op.create_index(op.f('ix_services_category'), 'services', ['category'], unique=False)

    if not table_exists('quotes'):
        op.create_table('quotes',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('client_id', sa.Integer(), nullable=False),
            sa.Column('requested_date', sa.Date(), nullable=False),
            sa.Column('site_address', sa.Text(), nullable=False),
            sa.Column('needs_description', sa.Text(), nullable=True),
            sa.Column('urgency', sa.String(length=20), nullable=False),
            sa.Column('total_amount', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('final_price', sa.Numeric(precision=10, scale=2), nullable=True),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column('admin_comment', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['client_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_quotes_id'), 'quotes', ['id'], unique=False)
        op.create_index(op.f('ix_quotes_client_id'), 'quotes', ['client_id'], unique=False)
        op.create_index(op.f('ix_quotes_status'), 'quotes', ['status'], unique=False)
        op.create_index(op.f('ix_quotes_created_at'), 'quotes', ['created_at'], unique=False)
        op.create_index('idx_quote_client_created', 'quotes', ['client_id', 'created_at'], unique=False)

    if not table_exists('quote_lines'):
        op.create_table('quote_lines',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('quote_id', sa.Integer(), nullable=False),
            sa.Column('service_id', sa.Integer(), nullable=False),
            sa.Column('quantity', sa.Integer(), nullable=False),
            sa.Column('unit_price', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.ForeignKeyConstraint(['quote_id'], ['quotes.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['service_id'], ['services.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_quote_lines_id'), 'quote_lines', ['id'], unique=False)
        op.create_index(op.f('ix_quote_lines_quote_id'), 'quote_lines', ['quote_id'], unique=False)
        op.create_index(op.f('ix_quote_lines_service_id'), 'quote_lines', ['service_id'], unique=False)


def downgrade() -> None:
    op.drop_table('quote_lines')
    op.drop_table('quotes')
    op.drop_table('services')
