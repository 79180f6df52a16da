"""Create inspection, credit and billing schema

Revision ID: 3f2a9c1d7e40
Revises: 
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLE = sa.Enum('ADMIN', 'SUPERADMIN', 'REVIEWER', 'INSPECTOR', 'CUSTOMER', 'DEVELOPER', name='role')
INSPECTION_STATUS = sa.Enum(
    'NEED_REVIEW', 'APPROVED', 'ARCHIVING', 'ARCHIVED', 'FAIL_ARCHIVE', 'DEACTIVATED',
    name='inspection_status',
)
PHOTO_TYPE = sa.Enum('FIXED', 'DYNAMIC', 'DOCUMENT', name='photo_type')
TARGET_PERIOD = sa.Enum('YEAR', 'MONTH', 'WEEK', 'DAY', name='target_period')
PURCHASE_STATUS = sa.Enum('PENDING', 'PAID', 'FAILED', 'EXPIRED', name='purchase_status')
PAYMENT_GATEWAY = sa.Enum('XENDIT', name='payment_gateway')


def upgrade() -> None:
    """Create the full schema"""

    op.create_table('inspection_branch_city',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('city', sa.String(), nullable=False),
        sa.Column('code', sa.String(length=3), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('city'),
        sa.UniqueConstraint('code')
    )

    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('username', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('password', sa.String(), nullable=True),
        sa.Column('pin', sa.String(), nullable=True),
        sa.Column('google_id', sa.String(), nullable=True),
        sa.Column('wallet_address', sa.String(), nullable=True),
        sa.Column('role', ROLE, server_default='CUSTOMER', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('credits', sa.Integer(), server_default='0', nullable=False),
        sa.Column('refresh_token_hash', sa.String(), nullable=True),
        sa.Column('inspection_branch_city_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['inspection_branch_city_id'], ['inspection_branch_city.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('google_id'),
        sa.UniqueConstraint('wallet_address')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table('blacklisted_tokens',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('token', sa.String(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_blacklisted_tokens_token', 'blacklisted_tokens', ['token'], unique=True)
    op.create_index('ix_blacklisted_tokens_expires_at', 'blacklisted_tokens', ['expires_at'])

    op.create_table('inspections',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('pretty_id', sa.String(), nullable=False),
        sa.Column('inspector_id', sa.Uuid(), nullable=True),
        sa.Column('reviewer_id', sa.Uuid(), nullable=True),
        sa.Column('branch_city_id', sa.Uuid(), nullable=True),
        sa.Column('vehicle_plate_number', sa.String(length=15), nullable=True),
        sa.Column('inspection_date', sa.DateTime(), nullable=True),
        sa.Column('overall_rating', sa.String(), nullable=True),
        sa.Column('identity_details', postgresql.JSONB(), nullable=True),
        sa.Column('vehicle_data', postgresql.JSONB(), nullable=True),
        sa.Column('equipment_checklist', postgresql.JSONB(), nullable=True),
        sa.Column('inspection_summary', postgresql.JSONB(), nullable=True),
        sa.Column('detailed_assessment', postgresql.JSONB(), nullable=True),
        sa.Column('body_paint_thickness', postgresql.JSONB(), nullable=True),
        sa.Column('notes_font_sizes', postgresql.JSONB(), nullable=True),
        sa.Column('status', INSPECTION_STATUS, server_default='NEED_REVIEW', nullable=False),
        sa.Column('url_pdf', sa.String(length=255), nullable=True),
        sa.Column('url_pdf_no_docs', sa.String(length=255), nullable=True),
        sa.Column('pdf_file_hash', sa.String(length=255), nullable=True),
        sa.Column('pdf_file_hash_no_docs', sa.String(length=255), nullable=True),
        sa.Column('nft_asset_id', sa.String(length=255), nullable=True),
        sa.Column('blockchain_tx_hash', sa.String(length=255), nullable=True),
        sa.Column('archived_at', sa.DateTime(), nullable=True),
        sa.Column('deactivated_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['inspector_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['reviewer_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['branch_city_id'], ['inspection_branch_city.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('nft_asset_id'),
        sa.UniqueConstraint('blockchain_tx_hash')
    )
    op.create_index('ix_inspections_pretty_id', 'inspections', ['pretty_id'], unique=True)
    op.create_index('ix_inspections_inspector_id', 'inspections', ['inspector_id'])
    op.create_index('ix_inspections_reviewer_id', 'inspections', ['reviewer_id'])
    op.create_index('ix_inspections_vehicle_plate_number', 'inspections', ['vehicle_plate_number'])
    op.create_index('ix_inspections_status', 'inspections', ['status'])
    op.create_index('ix_inspections_created_at', 'inspections', ['created_at'])

    op.create_table('inspection_photos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('inspection_id', sa.Uuid(), nullable=False),
        sa.Column('type', PHOTO_TYPE, nullable=False),
        sa.Column('path', sa.String(), nullable=False),
        sa.Column('label', sa.String(), nullable=False),
        sa.Column('original_label', sa.String(), nullable=True),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('is_mandatory', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('need_attention', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('backblaze_file_id', sa.String(), nullable=True),
        sa.Column('backblaze_file_name', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['inspection_id'], ['inspections.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_inspection_photos_inspection_id', 'inspection_photos', ['inspection_id'])

    op.create_table('inspection_change_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('inspection_id', sa.Uuid(), nullable=False),
        sa.Column('changed_by_user_id', sa.Uuid(), nullable=False),
        sa.Column('field_name', sa.String(), nullable=False),
        sa.Column('old_value', postgresql.JSONB(), nullable=True),
        sa.Column('new_value', postgresql.JSONB(), nullable=True),
        sa.Column('changed_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['inspection_id'], ['inspections.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['changed_by_user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_inspection_change_logs_inspection_id', 'inspection_change_logs', ['inspection_id'])
    op.create_index('ix_inspection_change_logs_changed_by_user_id', 'inspection_change_logs', ['changed_by_user_id'])

    op.create_table('inspection_sequences',
        sa.Column('branch_code', sa.String(length=3), nullable=False),
        sa.Column('date_prefix', sa.String(length=8), nullable=False),
        sa.Column('next_sequence', sa.Integer(), server_default='1', nullable=False),
        sa.PrimaryKeyConstraint('branch_code', 'date_prefix')
    )

    op.create_table('inspection_targets',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('target_value', sa.Integer(), nullable=False),
        sa.Column('period', TARGET_PERIOD, nullable=False),
        sa.Column('target_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('period', 'target_date', name='uq_inspection_targets_period_date')
    )

    op.create_table('credit_packages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('credits', sa.Integer(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('discount_pct', sa.Integer(), server_default='0', nullable=False),
        sa.Column('benefits', postgresql.JSONB(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('purchases',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('package_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('status', PURCHASE_STATUS, server_default='PENDING', nullable=False),
        sa.Column('gateway', PAYMENT_GATEWAY, server_default='XENDIT', nullable=False),
        sa.Column('ext_invoice_id', sa.String(), nullable=True),
        sa.Column('payment_url', sa.String(), nullable=True),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['package_id'], ['credit_packages.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_purchases_user_id', 'purchases', ['user_id'])
    op.create_index('ix_purchases_ext_invoice_id', 'purchases', ['ext_invoice_id'], unique=True)

    op.create_table('credit_consumptions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('unique_key', sa.String(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('inspection_id', sa.Uuid(), nullable=False),
        sa.Column('cost', sa.Integer(), server_default='1', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['inspection_id'], ['inspections.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('unique_key')
    )
    op.create_index('ix_credit_consumptions_user_id', 'credit_consumptions', ['user_id'])
    op.create_index('ix_credit_consumptions_inspection_id', 'credit_consumptions', ['inspection_id'])

    op.create_table('webhook_events',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('dedupe_key', sa.String(), nullable=False),
        sa.Column('gateway', sa.String(), nullable=False),
        sa.Column('ext_invoice_id', sa.String(), nullable=True),
        sa.Column('event_type', sa.String(), nullable=True),
        sa.Column('payload', postgresql.JSONB(), nullable=True),
        sa.Column('headers', postgresql.JSONB(), nullable=True),
        sa.Column('payload_hash', sa.String(length=64), nullable=True),
        sa.Column('attempts', sa.Integer(), server_default='1', nullable=False),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.Column('result', sa.String(), nullable=True),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('dedupe_key')
    )
    op.create_index('ix_webhook_events_ext_invoice_id', 'webhook_events', ['ext_invoice_id'])


def downgrade() -> None:
    """Drop the full schema"""
    op.drop_table('webhook_events')
    op.drop_table('credit_consumptions')
    op.drop_table('purchases')
    op.drop_table('credit_packages')
    op.drop_table('inspection_targets')
    op.drop_table('inspection_sequences')
    op.drop_table('inspection_change_logs')
    op.drop_table('inspection_photos')
    op.drop_table('inspections')
    op.drop_table('blacklisted_tokens')
    op.drop_table('users')
    op.drop_table('inspection_branch_city')

    bind = op.get_bind()
    for enum in (PAYMENT_GATEWAY, PURCHASE_STATUS, TARGET_PERIOD, PHOTO_TYPE, INSPECTION_STATUS, ROLE):
        enum.drop(bind, checkfirst=True)
