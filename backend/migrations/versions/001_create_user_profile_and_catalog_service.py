"""Create user_profile and catalog_service tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')


def upgrade():
    op.create_table(
        'user_profile',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('auth_id', sa.Text(), nullable=False),
        sa.Column('display_email', sa.Text(), nullable=True),
        sa.Column('first_name', sa.Text(), nullable=True),
        sa.Column('last_name', sa.Text(), nullable=True),
        sa.Column('phone', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('auth_id', name='uq_user_profile_auth_id'),
    )

    op.create_table(
        'catalog_service',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('category', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('visit_link', sa.Text(), nullable=True),

        # Order form definition
        sa.Column('required_documents_json', JSON_TYPE, nullable=False),
        sa.Column('custom_dropdowns_json', JSON_TYPE, nullable=False),
        sa.Column('application_details_json', JSON_TYPE, nullable=False),
        sa.Column('additional_fields_json', JSON_TYPE, nullable=False),

        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('price >= 0', name='ck_catalog_service_price'),
        sa.CheckConstraint(
            "category IN ('Documentation', 'Legal', 'Financial', 'Education', 'Other')",
            name='ck_catalog_service_category'
        ),
    )

    op.create_index('ix_catalog_service_category', 'catalog_service', ['category'])
    op.create_index('ix_catalog_service_active_title', 'catalog_service', ['is_active', 'title'])


def downgrade():
    op.drop_index('ix_catalog_service_active_title', table_name='catalog_service')
    op.drop_index('ix_catalog_service_category', table_name='catalog_service')
    op.drop_table('catalog_service')
    op.drop_table('user_profile')
