"""
Domain Models for RideWitUS

Pure Python/Pydantic models with no framework dependencies.
These models define the core business entities and validation rules.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _LowercaseEnum(str, Enum):
    """
    String enum with lowercase canonical values.

    Legacy rows and clients used uppercase values (``USER``, ``FREE``);
    those are accepted and normalized on the way in.
    """

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class Role(_LowercaseEnum):
    """Account roles controlling administrative authorization."""
    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"


class SubscriptionStatus(_LowercaseEnum):
    """Account subscription status."""
    FREE = "free"
    MONTHLY = "monthly"
    ANNUAL = "annual"
    NONE = "none"


PREMIUM_STATUSES = frozenset({SubscriptionStatus.MONTHLY, SubscriptionStatus.ANNUAL})


class ActivityType(_LowercaseEnum):
    """Kinds of logged movement."""
    WALKING = "walking"
    RUNNING = "running"
    BIKING = "biking"
    DRIVING = "driving"


class DistanceUnit(_LowercaseEnum):
    """Linear units for distances."""
    MILES = "miles"
    KM = "km"


class BillingInterval(_LowercaseEnum):
    """Billing interval of a pricing tier."""
    MONTH = "month"
    YEAR = "year"


class ImportMode(_LowercaseEnum):
    """How imported activities combine with existing ones."""
    MERGE = "merge"
    REPLACE = "replace"


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys for API clients."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Accounts
# =============================================================================

class AccountRead(CamelModel):
    """Public projection of an account. Never carries the password hash."""
    id: str
    email: str
    name: str
    role: Role
    subscription_status: SubscriptionStatus
    subscription_expiry: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class AuthResult(CamelModel):
    """Account plus the session token issued for it."""
    account: AccountRead
    token: str


# =============================================================================
# Activities
# =============================================================================

class ActivityRecord(CamelModel):
    """A single logged activity. Distance unit depends on context."""
    id: str
    date: datetime
    type: ActivityType
    distance: float = Field(..., ge=0, allow_inf_nan=False)
    duration: float = Field(..., ge=0, allow_inf_nan=False, description="Duration in minutes")
    maintenance_cost: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    notes: Optional[str] = None


class ActivityCreate(CamelModel):
    """Schema for logging a new activity (distance in the display unit)."""
    id: Optional[str] = Field(default=None, max_length=100)
    date: datetime
    type: ActivityType
    distance: float = Field(..., ge=0, allow_inf_nan=False)
    duration: float = Field(..., ge=0, allow_inf_nan=False)
    maintenance_cost: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    notes: Optional[str] = Field(default=None, max_length=2000)


class ActivityUpdate(CamelModel):
    """Schema for editing an activity. All fields optional."""
    date: Optional[datetime] = None
    type: Optional[ActivityType] = None
    distance: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    duration: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    maintenance_cost: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    notes: Optional[str] = Field(default=None, max_length=2000)


class DailyTotal(CamelModel):
    """Per-day sums used for charting."""
    day: date
    total_distance: float
    total_duration: float
    total_maintenance_cost: float


class ActivityStats(CamelModel):
    """Summary statistics over a filtered activity set."""
    unit: DistanceUnit
    activity_count: int
    total_distance: float
    total_duration: float
    total_maintenance_cost: float
    average_speed: float = Field(description="Distance per hour in the display unit")
    daily_totals: List[DailyTotal]


class ImportResult(CamelModel):
    """Outcome of a CSV import."""
    mode: ImportMode
    imported: int
    skipped: int
    total: int


# =============================================================================
# Pricing
# =============================================================================

class PricingTierSchema(CamelModel):
    """A subscription plan as shown to users and administrators."""
    id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., ge=0)
    interval: BillingInterval = BillingInterval.MONTH
    features: List[str] = Field(default_factory=list)
    stripe_price_id: Optional[str] = None

    @property
    def is_priced(self) -> bool:
        return self.price > 0


# =============================================================================
# API Responses
# =============================================================================

class MessageResponse(CamelModel):
    success: bool = True
    message: str


class AccountResponse(CamelModel):
    """Envelope for endpoints returning one account."""
    success: bool = True
    user: AccountRead


class AccountListResponse(CamelModel):
    success: bool = True
    users: List[AccountRead]


class SyncDownloadResponse(CamelModel):
    success: bool = True
    activities: List[ActivityRecord]


class SyncUploadResponse(CamelModel):
    success: bool = True
    count: int


class CheckoutResponse(CamelModel):
    """Hosted checkout session created for a pricing tier."""
    session_id: str
    url: Optional[str] = None
