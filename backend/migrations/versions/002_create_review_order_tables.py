"""Create review_order table and its child tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 09:30:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')

ORDER_STATUSES = (
    'pending', 'processing', 'completed', 'rejected', 'finalized',
    'cancelled', 'approved', 'payment_pending', 'payment_completed',
)
TRACKING_STATUSES = (
    'Approved', 'Cancelled', 'Completed Successfully', 'Documents Rejected',
    'Documents Under Review', 'Order Placed', 'Payment Completed', 'Payment Pending',
    'Pending Approval', 'Processing Started', 'Rejected', 'Review Completed',
)


def _in(column, values):
    return "{} IN ({})".format(column, ", ".join("'{}'".format(v) for v in values))


def upgrade():
    op.create_table(
        'review_order',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('service_id', sa.Uuid(), nullable=False),
        sa.Column('order_identifier', sa.Text(), server_default='', nullable=False),
        sa.Column('selector_field', sa.Text(), server_default='', nullable=False),

        # Workflow state
        sa.Column('status', sa.Text(), server_default='pending', nullable=False),
        sa.Column('tracking_status', sa.Text(), server_default='Order Placed', nullable=False),
        sa.Column('chat_status', sa.Text(), server_default='Enabled', nullable=False),
        sa.Column('approve_status', sa.Text(), server_default='Disabled', nullable=False),

        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['user_profile.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['service_id'], ['catalog_service.id'], ondelete='RESTRICT'),
        sa.CheckConstraint(_in('status', ORDER_STATUSES), name='ck_review_order_status'),
        sa.CheckConstraint(_in('tracking_status', TRACKING_STATUSES), name='ck_review_order_tracking_status'),
        sa.CheckConstraint(_in('chat_status', ('Enabled', 'Disabled')), name='ck_review_order_chat_status'),
        sa.CheckConstraint(_in('approve_status', ('Enabled', 'Disabled')), name='ck_review_order_approve_status'),
    )
    op.create_index('ix_review_order_user_created', 'review_order', ['user_id', 'created_at'])
    op.create_index('ix_review_order_user_tracking', 'review_order', ['user_id', 'tracking_status'])

    op.create_table(
        'review_order_document',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('review_order_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('document_name', sa.Text(), nullable=False),
        sa.Column('storage_hash', sa.Text(), nullable=True),
        sa.Column('storage_url', sa.Text(), nullable=True),
        sa.Column('ocr_data_json', JSON_TYPE, nullable=False),
        sa.Column('file_uploaded', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['review_order_id'], ['review_order.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_review_order_document_order', 'review_order_document', ['review_order_id'])

    op.create_table(
        'review_order_field',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('review_order_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('field_name', sa.Text(), nullable=False),
        sa.Column('field_value', JSON_TYPE, nullable=True),
        sa.Column('field_type', sa.Text(), server_default='text', nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['review_order_id'], ['review_order.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('review_order_id', 'field_name', name='uq_review_order_field_name'),
        sa.CheckConstraint(
            _in('field_type', ('text', 'number', 'date', 'select', 'boolean')),
            name='ck_review_order_field_type'
        ),
    )

    # Append-only status snapshots
    op.create_table(
        'order_status_history',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('review_order_id', sa.Uuid(), nullable=False),
        sa.Column('entry_no', sa.Integer(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('tracking_status', sa.Text(), nullable=False),
        sa.Column('chat_status', sa.Text(), nullable=False),
        sa.Column('approve_status', sa.Text(), nullable=False),
        sa.Column('updated_by', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['review_order_id'], ['review_order.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('review_order_id', 'entry_no', name='uq_order_status_history_entry'),
    )


def downgrade():
    op.drop_table('order_status_history')
    op.drop_table('review_order_field')
    op.drop_index('ix_review_order_document_order', table_name='review_order_document')
    op.drop_table('review_order_document')
    op.drop_index('ix_review_order_user_tracking', table_name='review_order')
    op.drop_index('ix_review_order_user_created', table_name='review_order')
    op.drop_table('review_order')
