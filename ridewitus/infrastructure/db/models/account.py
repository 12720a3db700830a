"""
Account SQLModel for RideWitUS

Registered users. Role and subscription status are stored as lowercase
strings; the public projection is ``AccountRead``.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ridewitus.domain.models import Role, SubscriptionStatus
from ridewitus.infrastructure.db.models.base import TimestampMixin, new_id


class Account(TimestampMixin, table=True):
    """Account database table model."""

    __tablename__ = "accounts"

    id: str = Field(
        default_factory=new_id,
        primary_key=True,
        max_length=36,
        description="Opaque account identifier"
    )
    email: str = Field(
        ...,
        unique=True,
        index=True,
        max_length=255,
        description="Login email, unique as stored"
    )
    name: str = Field(..., max_length=100)
    password_hash: str = Field(..., max_length=255)
    role: str = Field(default=Role.USER.value, max_length=20)
    subscription_status: str = Field(default=SubscriptionStatus.FREE.value, max_length=20)
    subscription_expiry: Optional[datetime] = Field(default=None)
    stripe_customer_id: Optional[str] = Field(default=None, index=True, max_length=255)

    @property
    def role_enum(self) -> Role:
        return Role(self.role)

    @property
    def subscription_enum(self) -> SubscriptionStatus:
        return SubscriptionStatus(self.subscription_status)
