"""Create finalized_order and finalized_order_document tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-19 10:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '003'
down_revision = '002'
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')


def upgrade():
    op.create_table(
        'finalized_order',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('source_order_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('service_id', sa.Uuid(), nullable=False),
        sa.Column('order_identifier', sa.Text(), server_default='', nullable=False),
        sa.Column('selector_field', sa.Text(), server_default='', nullable=False),
        sa.Column('additional_fields_json', JSON_TYPE, nullable=False),
        sa.Column('tracking_status', sa.Text(), server_default='Approved', nullable=False),
        sa.Column('approved_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['user_profile.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['service_id'], ['catalog_service.id'], ondelete='RESTRICT'),
        # One finalized record per approved review order
        sa.UniqueConstraint('source_order_id', name='uq_finalized_order_source'),
        sa.CheckConstraint(
            "tracking_status IN ('Approved', 'Completed')",
            name='ck_finalized_order_tracking_status'
        ),
    )
    op.create_index('ix_finalized_order_user_created', 'finalized_order', ['user_id', 'created_at'])

    op.create_table(
        'finalized_order_document',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('finalized_order_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('document_name', sa.Text(), nullable=False),
        sa.Column('storage_url', sa.Text(), server_default='', nullable=False),
        sa.Column('ocr_data_json', JSON_TYPE, nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['finalized_order_id'], ['finalized_order.id'], ondelete='CASCADE'),
    )


def downgrade():
    op.drop_table('finalized_order_document')
    op.drop_index('ix_finalized_order_user_created', table_name='finalized_order')
    op.drop_table('finalized_order')
