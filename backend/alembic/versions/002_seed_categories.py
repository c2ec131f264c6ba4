"""Seed the default machine categories and their product types

Revision ID: 002_seed_categories
Revises: 001_catalog_schema
Create Date: 2026-09-14

"""
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '002_seed_categories'
down_revision: Union[str, None] = '001_catalog_schema'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


CATEGORIES = [
    ('Snack', 'Snack vending machines', '🍿',
     ['Bagged Snack', 'Candy Bar', 'Chips', 'Nuts']),
    ('Drink', 'Beverage vending machines', '🥤',
     ['12oz Can', '16oz Bottle', '20oz Bottle', 'Energy Drink']),
    ('Sunscreen', 'Sunscreen and personal care products', '🧴',
     ['Spray Bottle', 'Lotion Bottle', 'Travel Size']),
    ('Combo', 'Combination snack and drink machines', '📦',
     ['Snack + Drink Bundle', 'Meal Deal']),
]


def upgrade() -> None:
    # Seed only an empty catalog
    conn = op.get_bind()
    existing = conn.execute(sa.text("SELECT 1 FROM machine_categories LIMIT 1")).fetchone()
    if existing is not None:
        return
    for name, description, icon, type_names in CATEGORIES:
        category_id = str(uuid.uuid4())
        conn.execute(
            sa.text(
                "INSERT INTO machine_categories (id, name, description, icon) "
                "VALUES (:id, :n, :d, :i)"
            ),
            {"id": category_id, "n": name, "d": description, "i": icon},
        )
        for type_name in type_names:
            conn.execute(
                sa.text(
                    "INSERT INTO product_types (id, name, machine_category_id) "
                    "VALUES (:id, :n, :c)"
                ),
                {"id": str(uuid.uuid4()), "n": type_name, "c": category_id},
            )


def downgrade() -> None:
    names = [c[0] for c in CATEGORIES]
    conn = op.get_bind()
    for name in names:
        conn.execute(
            sa.text(
                "DELETE FROM product_types WHERE machine_category_id IN "
                "(SELECT id FROM machine_categories WHERE name = :n)"
            ),
            {"n": name},
        )
        conn.execute(sa.text("DELETE FROM machine_categories WHERE name = :n"), {"n": name})
