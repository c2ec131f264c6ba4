"""Catalog schema: machine categories, product types, global and company products, machine templates

Revision ID: 001_catalog_schema
Revises:
Create Date: 2026-09-14

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


revision: str = '001_catalog_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'machine_categories',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon', sa.String(32), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'product_types',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column(
            'machine_category_id', sa.String(36),
            sa.ForeignKey('machine_categories.id', ondelete='RESTRICT'), nullable=False, index=True,
        ),
        *_timestamps(),
    )

    op.create_table(
        'global_products',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'machine_category_id', sa.String(36),
            sa.ForeignKey('machine_categories.id', ondelete='RESTRICT'), nullable=False, index=True,
        ),
        sa.Column(
            'product_type_id', sa.String(36),
            sa.ForeignKey('product_types.id', ondelete='RESTRICT'), nullable=False, index=True,
        ),
        sa.Column('brand', sa.String(255), nullable=False),
        sa.Column('product_name', sa.String(255), nullable=False, index=True),
        sa.Column('image', sa.String(1024), nullable=False),
        sa.Column('in_global_catalog', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('in_company_catalog', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        'company_products',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'product_id', sa.String(36),
            sa.ForeignKey('global_products.id', ondelete='RESTRICT'), nullable=False, index=True,
        ),
        sa.Column('company_id', sa.String(64), nullable=False, index=True),
        sa.Column('base_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('active_for_customer_building', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('commission_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('commission_rate', sa.Numeric(5, 2), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('product_id', 'company_id', name='uq_company_products_product_company'),
        sa.CheckConstraint(
            'NOT active_for_customer_building OR base_price IS NOT NULL',
            name='ck_company_products_active_requires_price',
        ),
    )

    op.create_table(
        'machine_templates',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column(
            'machine_category_id', sa.String(36),
            sa.ForeignKey('machine_categories.id', ondelete='RESTRICT'), nullable=False, index=True,
        ),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('template_data', sa.JSON().with_variant(JSONB, 'postgresql'), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table('machine_templates')
    op.drop_table('company_products')
    op.drop_table('global_products')
    op.drop_table('product_types')
    op.drop_table('machine_categories')
