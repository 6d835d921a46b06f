"""Initial schema for restaurants, menus, menu items, and their association

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-09-10

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Restaurants: normalized name is unique across the store
    op.create_table(
        'restaurants',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('name_key', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_restaurants_name_key', 'restaurants', ['name_key'], unique=True)

    # Menus: normalized name is unique per restaurant
    op.create_table(
        'menus',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('name_key', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('restaurant_id', 'name_key', name='uq_menus_restaurant_name_key'),
    )

    # Menu items: (normalized name, price) identifies an item
    op.create_table(
        'menu_items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('name_key', sa.String(255), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('name_key', 'price', name='uq_menu_items_name_key_price'),
        sa.CheckConstraint('price > 0', name='ck_menu_items_price_positive'),
    )

    # Join table between menus and menu items
    op.create_table(
        'menu_items_menus',
        sa.Column('menu_id', sa.Integer(), sa.ForeignKey('menus.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('menu_item_id', sa.Integer(), sa.ForeignKey('menu_items.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_index('idx_menu_items_menus_item_menu', 'menu_items_menus', ['menu_item_id', 'menu_id'])


def downgrade() -> None:
    op.drop_table('menu_items_menus')
    op.drop_table('menu_items')
    op.drop_table('menus')
    op.drop_index('ix_restaurants_name_key', table_name='restaurants')
    op.drop_table('restaurants')
