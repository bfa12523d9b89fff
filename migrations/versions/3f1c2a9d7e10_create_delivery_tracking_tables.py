"""create_delivery_tracking_tables

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7e10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

delivery_status = sa.Enum('Pending', 'In Transit', 'Delivered', name='delivery_status')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'deliveries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tracking_number', sa.String(length=50), nullable=False),
        sa.Column('sender_address', sa.String(length=255), nullable=False),
        sa.Column('recipient_name', sa.String(length=255), nullable=False),
        sa.Column('origin', sa.Text(), nullable=False),
        sa.Column('destination', sa.Text(), nullable=False),
        sa.Column('status', delivery_status, nullable=False),
        sa.Column('transaction_hash', sa.String(length=100), nullable=False),
        sa.Column('block_number', sa.BigInteger(), nullable=True),
        sa.Column('chain_delivery_id', sa.String(length=100), nullable=True),
        sa.Column('estimated_delivery', sa.DateTime(timezone=True), nullable=False),
        sa.Column('package_weight', sa.String(length=50), nullable=True),
        sa.Column('package_dimensions', sa.String(length=100), nullable=True),
        sa.Column('package_description', sa.Text(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_deliveries_id'), 'deliveries', ['id'], unique=False)
    op.create_index(op.f('ix_deliveries_tracking_number'), 'deliveries', ['tracking_number'], unique=True)

    op.create_table(
        'delivery_locations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('delivery_id', sa.Integer(), nullable=False),
        sa.Column('latitude', sa.Numeric(precision=10, scale=8), nullable=True),
        sa.Column('longitude', sa.Numeric(precision=11, scale=8), nullable=True),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('transaction_hash', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['delivery_id'], ['deliveries.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_delivery_locations_id'), 'delivery_locations', ['id'], unique=False)
    op.create_index(op.f('ix_delivery_locations_delivery_id'), 'delivery_locations', ['delivery_id'], unique=False)

    op.create_table(
        'delivery_transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('delivery_id', sa.Integer(), nullable=False),
        sa.Column('transaction_hash', sa.String(length=100), nullable=False),
        sa.Column('transaction_type', sa.String(length=30), nullable=False),
        sa.Column('block_number', sa.BigInteger(), nullable=True),
        sa.Column('from_address', sa.String(length=255), nullable=False),
        sa.Column('gas_used', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['delivery_id'], ['deliveries.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_delivery_transactions_id'), 'delivery_transactions', ['id'], unique=False)
    op.create_index(op.f('ix_delivery_transactions_delivery_id'), 'delivery_transactions', ['delivery_id'], unique=False)
    op.create_index(op.f('ix_delivery_transactions_transaction_hash'), 'delivery_transactions', ['transaction_hash'], unique=False)
    op.create_index(op.f('ix_delivery_transactions_transaction_type'), 'delivery_transactions', ['transaction_type'], unique=False)


def downgrade():
    op.drop_table('delivery_transactions')
    op.drop_table('delivery_locations')
    op.drop_table('deliveries')
    op.drop_table('users')
    delivery_status.drop(op.get_bind(), checkfirst=True)
