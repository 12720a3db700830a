"""
Activity SQLModel for RideWitUS

Logged activities. The primary key is (account_id, id) so ids coming from
CSV imports only need to be unique within their owner's records. Distance
is always stored in the canonical unit of the activity type.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlmodel import Field

from ridewitus.infrastructure.db.models.base import TimestampMixin, new_id


class Activity(TimestampMixin, table=True):
    """Activity database table model."""

    __tablename__ = "activities"

    account_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("accounts.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    id: str = Field(default_factory=new_id, primary_key=True, max_length=100)
    # Wall-clock time as entered, without tzinfo.
    date: datetime = Field(sa_column=Column(DateTime(), index=True, nullable=False))
    type: str = Field(..., max_length=20)
    distance: float = Field(..., description="Distance in the type's canonical unit")
    duration: float = Field(..., description="Duration in minutes")
    maintenance_cost: Optional[float] = Field(default=None)
    notes: Optional[str] = Field(default=None)
