"""Create places table for reading spot submissions.

Revision ID: create_places_table
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'create_places_table'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('places',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('original_language', sa.String(length=2), nullable=False),
        sa.Column('name_en', sa.String(length=255), nullable=True),
        sa.Column('name_ko', sa.String(length=255), nullable=True),
        sa.Column('description_en', sa.Text(), nullable=True),
        sa.Column('description_ko', sa.Text(), nullable=True),
        sa.Column('city_en', sa.String(length=100), nullable=True),
        sa.Column('city_ko', sa.String(length=100), nullable=True),
        sa.Column('district_en', sa.String(length=100), nullable=True),
        sa.Column('district_ko', sa.String(length=100), nullable=True),
        sa.Column('location_en', sa.String(length=255), nullable=True),
        sa.Column('location_ko', sa.String(length=255), nullable=True),
        sa.Column('recommended_book_en', sa.Text(), nullable=True),
        sa.Column('recommended_book_ko', sa.Text(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('quietness', sa.Integer(), nullable=True),
        sa.Column('photos', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index(op.f('ix_places_name_en'), 'places', ['name_en'], unique=False)
    op.create_index(op.f('ix_places_name_ko'), 'places', ['name_ko'], unique=False)
    op.create_index(op.f('ix_places_category'), 'places', ['category'], unique=False)
    op.create_index(op.f('ix_places_status'), 'places', ['status'], unique=False)
    op.create_index(op.f('ix_places_created_at'), 'places', ['created_at'], unique=False)
    op.create_index(op.f('ix_places_updated_at'), 'places', ['updated_at'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_places_updated_at'), table_name='places')
    op.drop_index(op.f('ix_places_created_at'), table_name='places')
    op.drop_index(op.f('ix_places_status'), table_name='places')
    op.drop_index(op.f('ix_places_category'), table_name='places')
    op.drop_index(op.f('ix_places_name_ko'), table_name='places')
    op.drop_index(op.f('ix_places_name_en'), table_name='places')

    op.drop_table('places')
