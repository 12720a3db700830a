"""Create accounts, activities and pricing tiers

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the three application tables."""

    op.create_table(
        'accounts',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),

        # Authorization and plan
        sa.Column('role', sa.String(20), server_default='user', nullable=False),
        sa.Column('subscription_status', sa.String(20), server_default='free', nullable=False),
        sa.Column('subscription_expiry', sa.DateTime(timezone=True)),
        sa.Column('stripe_customer_id', sa.String(255)),

        # Timestamps
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_accounts_email', 'accounts', ['email'], unique=True)
    op.create_index('ix_accounts_stripe_customer_id', 'accounts', ['stripe_customer_id'])

    op.create_table(
        'activities',
        sa.Column(
            'account_id',
            sa.String(36),
            sa.ForeignKey('accounts.id', ondelete='CASCADE'),
            primary_key=True,
        ),
        sa.Column('id', sa.String(100), primary_key=True),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('distance', sa.Float(), nullable=False),
        sa.Column('duration', sa.Float(), nullable=False),
        sa.Column('maintenance_cost', sa.Float()),
        sa.Column('notes', sa.Text()),

        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_activities_date', 'activities', ['date'])

    op.create_table(
        'pricing_tiers',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('price', sa.Float(), server_default='0', nullable=False),
        sa.Column('interval', sa.String(10), server_default='month', nullable=False),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('stripe_price_id', sa.String(255)),
        sa.Column('position', sa.Integer(), server_default='0', nullable=False),

        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    """Drop the application tables."""
    op.drop_table('pricing_tiers')
    op.drop_index('ix_activities_date', table_name='activities')
    op.drop_table('activities')
    op.drop_index('ix_accounts_stripe_customer_id', table_name='accounts')
    op.drop_index('ix_accounts_email', table_name='accounts')
    op.drop_table('accounts')
