"""create_marketplace_tables

Revision ID: 3f1c9a7d2e10
Revises:
Create Date: 2026-10-19 10:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum columns store member names.
userrole = sa.Enum('buyer', 'dealer', 'admin', name='userrole')
kycstatus = sa.Enum('none', 'pending', 'approved', 'rejected', name='kycstatus')
listingstatus = sa.Enum(
    'pending', 'approved', 'rejected', 'archived', name='listingstatus'
)
archivedby = sa.Enum('dealer', 'admin', name='archivedby')
bodytype = sa.Enum('luxury', 'sports', 'suv', 'classic', name='bodytype')
transmission = sa.Enum('automatic', 'manual', name='transmission')
fuel = sa.Enum('petrol', 'electric', 'hybrid', name='fuel')
bookingstatus = sa.Enum('pending', 'confirmed', 'cancelled', name='bookingstatus')
rentalstatus = sa.Enum('pending', 'accepted', 'cancelled', name='rentalstatus')
paymentstatus = sa.Enum('pending', 'verified', 'rejected', name='paymentstatus')
paymentitemtype = sa.Enum('purchase', 'rental', name='paymentitemtype')
paymentmethod = sa.Enum('bank_transfer', 'crypto', 'card', name='paymentmethod')
notificationtype = sa.Enum('info', 'success', 'warning', name='notificationtype')
audience = sa.Enum('all_users', 'dealers', 'direct', name='audience')


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            'created_at',
            sa.DateTime(),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
    ]


def _fulfillment_columns() -> list[sa.Column]:
    return [
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('dealer_id', sa.Uuid(), nullable=True),
        sa.Column('listing_id', sa.Uuid(), nullable=False),
        sa.Column('location', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('hide_from_dealer', sa.Boolean(), nullable=False),
        sa.Column('listing_label', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('user_name', sqlmodel.sql.sqltypes.AutoString(length=120), nullable=False),
        sa.Column('user_email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('external_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('first_name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('last_name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('role', userrole, nullable=False),
        sa.Column('is_suspended', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('verification_override', sa.Boolean(), nullable=False),
        sa.Column('kyc_status', kycstatus, nullable=False),
        sa.Column('kyc_documents', sa.JSON(), nullable=True),
        sa.Column('kyc_rejection_reason', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column('favorites', sa.JSON(), nullable=False),
        sa.Column('security_settings', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_external_id'), 'users', ['external_id'], unique=True)

    op.create_table(
        'listings',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('make', sqlmodel.sql.sqltypes.AutoString(length=60), nullable=False),
        sa.Column('model', sqlmodel.sql.sqltypes.AutoString(length=60), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('body_type', bodytype, nullable=False),
        sa.Column('transmission', transmission, nullable=False),
        sa.Column('fuel', fuel, nullable=False),
        sa.Column('mileage', sa.Integer(), nullable=False),
        sa.Column('hp', sa.Integer(), nullable=False),
        sa.Column('acceleration', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('categories', sa.JSON(), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('dealer_id', sa.Uuid(), nullable=True),
        sa.Column('status', listingstatus, nullable=False),
        sa.Column('moderation_reason', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column('archived_by', archivedby, nullable=True),
        sa.Column('is_suspended', sa.Boolean(), nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['dealer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_listings_dealer_id'), 'listings', ['dealer_id'])
    op.create_index(op.f('ix_listings_status'), 'listings', ['status'])

    op.create_table(
        'bookings',
        sa.Column('id', sa.Uuid(), nullable=False),
        *_fulfillment_columns(),
        sa.Column('scheduled_date', sa.Date(), nullable=False),
        sa.Column('scheduled_time', sa.Time(), nullable=False),
        sa.Column('status', bookingstatus, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'rentals',
        sa.Column('id', sa.Uuid(), nullable=False),
        *_fulfillment_columns(),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('security_option', sqlmodel.sql.sqltypes.AutoString(length=60), nullable=False),
        sa.Column('status', rentalstatus, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    for table in ('bookings', 'rentals'):
        for column in ('user_id', 'dealer_id', 'listing_id'):
            op.create_index(op.f(f'ix_{table}_{column}'), table, [column])

    op.create_table(
        'payments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('user_name', sqlmodel.sql.sqltypes.AutoString(length=120), nullable=False),
        sa.Column('item_type', paymentitemtype, nullable=False),
        sa.Column('item_id', sa.Uuid(), nullable=False),
        sa.Column('item_description', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('method', paymentmethod, nullable=False),
        sa.Column('reference_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('status', paymentstatus, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_payments_user_id'), 'payments', ['user_id'])
    op.create_index(op.f('ix_payments_item_id'), 'payments', ['item_id'])
    op.create_index(op.f('ix_payments_status'), 'payments', ['status'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('recipient_id', sa.Uuid(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('message', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('type', notificationtype, nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.Column('time', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['recipient_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_notifications_recipient_id'), 'notifications', ['recipient_id'])
    op.create_index(op.f('ix_notifications_time'), 'notifications', ['time'])

    op.create_table(
        'message_log',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('audience', audience, nullable=False),
        sa.Column('recipient_id', sa.Uuid(), nullable=True),
        sa.Column('sender_id', sa.Uuid(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('message', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('type', notificationtype, nullable=False),
        sa.Column('recipient_count', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['recipient_id'], ['users.id']),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_message_log_audience'), 'message_log', ['audience'])

    op.create_table(
        'inquiries',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=120), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('phone', sqlmodel.sql.sqltypes.AutoString(length=40), nullable=False),
        sa.Column('interest', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=True),
        sa.Column('message', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        'inquiries',
        'message_log',
        'notifications',
        'payments',
        'rentals',
        'bookings',
        'listings',
        'users',
    ):
        op.drop_table(table)

    # Drop the enum types (PostgreSQL)
    bind = op.get_bind()
    for enum in (
        userrole, kycstatus, listingstatus, archivedby, bodytype, transmission,
        fuel, bookingstatus, rentalstatus, paymentstatus, paymentitemtype,
        paymentmethod, notificationtype, audience,
    ):
        enum.drop(bind, checkfirst=True)
