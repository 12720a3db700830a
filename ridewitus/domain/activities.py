"""
Activity Service

Per-account activity records: CRUD with unit normalization, summary
statistics, CSV import/export and premium cloud sync.

Distances enter and leave in the caller's display unit and are stored in
the canonical unit of each activity type. CSV and sync payloads carry
canonical distances.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from ridewitus.domain import aggregation, csv_io
from ridewitus.domain.models import (
    PREMIUM_STATUSES,
    ActivityCreate,
    ActivityRecord,
    ActivityStats,
    ActivityType,
    ActivityUpdate,
    DistanceUnit,
    ImportMode,
    ImportResult,
)
from ridewitus.domain.units import to_canonical, to_display
from ridewitus.infrastructure.db.models.account import Account
from ridewitus.infrastructure.db.models.activity import Activity
from ridewitus.infrastructure.db.models.base import new_id
from ridewitus.infrastructure.db.repositories.activity_repository import ActivityRepository
from ridewitus.infrastructure.exceptions import (
    AuthorizationError,
    ConflictError,
    ErrorCode,
    NotFoundError,
)


logger = logging.getLogger(__name__)


def wall_clock(value: datetime) -> datetime:
    """Drop tzinfo and keep the time as read in its own zone."""
    return value.replace(tzinfo=None)


def to_record(activity: Activity, unit: Optional[DistanceUnit] = None) -> ActivityRecord:
    """Project a stored activity, converting its distance when ``unit`` is given."""
    distance = activity.distance
    if unit is not None:
        distance = to_display(distance, ActivityType(activity.type), unit)
    return ActivityRecord(
        id=activity.id,
        date=activity.date,
        type=ActivityType(activity.type),
        distance=distance,
        duration=activity.duration,
        maintenance_cost=activity.maintenance_cost,
        notes=activity.notes,
    )


def _from_record(account_id: str, record: ActivityRecord) -> Activity:
    return Activity(
        account_id=account_id,
        id=record.id,
        date=wall_clock(record.date),
        type=ActivityType(record.type).value,
        distance=record.distance,
        duration=record.duration,
        maintenance_cost=record.maintenance_cost,
        notes=record.notes,
    )


def _unique_by_id(records: Iterable[ActivityRecord]) -> List[ActivityRecord]:
    seen = set()
    unique = []
    for record in records:
        if record.id in seen:
            continue
        seen.add(record.id)
        unique.append(record)
    return unique


def ensure_premium(account: Account) -> None:
    if account.subscription_enum not in PREMIUM_STATUSES:
        raise AuthorizationError(
            "Cloud sync requires a premium subscription",
            error_code=ErrorCode.PREMIUM_REQUIRED,
        )


class ActivityService:
    """
    Service for one request's activity operations.

    Args:
        activities: Activity repository bound to the request's session
    """

    def __init__(self, activities: ActivityRepository):
        self._activities = activities

    async def _require(self, account_id: str, activity_id: str) -> Activity:
        activity = await self._activities.get_for_account(account_id, activity_id)
        if activity is None:
            raise NotFoundError("Activity not found", error_code=ErrorCode.ACTIVITY_NOT_FOUND)
        return activity

    async def _replace_all(self, account_id: str, records: List[ActivityRecord]) -> int:
        removed = await self._activities.clear_for_account(account_id)
        await self._activities.add_many([_from_record(account_id, r) for r in records])
        logger.info(
            f"Replaced {removed} activities with {len(records)} for account {account_id}"
        )
        return len(records)

    # =========================================================================
    # CRUD
    # =========================================================================

    async def list_activities(
        self,
        account_id: str,
        unit: DistanceUnit,
        types: Optional[List[ActivityType]] = None,
        days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[ActivityRecord]:
        """Records in the display unit, newest first, optionally filtered."""
        records = [to_record(a, unit) for a in await self._activities.list_for_account(account_id)]
        if types:
            records = aggregation.filter_by_type(records, types)
        if days is not None:
            records = aggregation.filter_by_time_range(records, days, now=now)
        return records

    async def create(
        self,
        account_id: str,
        payload: ActivityCreate,
        unit: DistanceUnit,
    ) -> ActivityRecord:
        """
        Log a new activity; the entered distance is in ``unit``.

        Raises:
            ConflictError: ACTIVITY_EXISTS when the given id is taken
        """
        activity_id = payload.id or new_id()
        if payload.id and await self._activities.get_for_account(account_id, activity_id):
            raise ConflictError(
                "An activity with this id already exists",
                error_code=ErrorCode.ACTIVITY_EXISTS,
            )

        activity = Activity(
            account_id=account_id,
            id=activity_id,
            date=wall_clock(payload.date),
            type=payload.type.value,
            distance=to_canonical(payload.distance, payload.type, unit),
            duration=payload.duration,
            maintenance_cost=payload.maintenance_cost,
            notes=payload.notes,
        )
        activity = await self._activities.add(activity)
        return to_record(activity, unit)

    async def update(
        self,
        account_id: str,
        activity_id: str,
        payload: ActivityUpdate,
        unit: DistanceUnit,
    ) -> ActivityRecord:
        """
        Edit an activity. Changing only the type keeps the displayed
        distance and re-normalizes it for the new type.
        """
        activity = await self._require(account_id, activity_id)
        changes = payload.model_dump(exclude_unset=True)

        old_type = ActivityType(activity.type)
        new_type = ActivityType(changes.get("type") or old_type)
        if "distance" in changes or new_type != old_type:
            display = changes.get("distance")
            if display is None:
                display = to_display(activity.distance, old_type, unit)
            activity.distance = to_canonical(display, new_type, unit)
        activity.type = new_type.value

        if changes.get("date") is not None:
            activity.date = wall_clock(changes["date"])
        if changes.get("duration") is not None:
            activity.duration = changes["duration"]
        for name in ("maintenance_cost", "notes"):
            if name in changes:
                setattr(activity, name, changes[name])

        activity = await self._activities.add(activity)
        return to_record(activity, unit)

    async def delete(self, account_id: str, activity_id: str) -> None:
        if not await self._activities.delete_for_account(account_id, activity_id):
            raise NotFoundError("Activity not found", error_code=ErrorCode.ACTIVITY_NOT_FOUND)

    async def clear(self, account_id: str) -> int:
        removed = await self._activities.clear_for_account(account_id)
        logger.info(f"Cleared {removed} activities for account {account_id}")
        return removed

    # =========================================================================
    # Statistics
    # =========================================================================

    async def stats(
        self,
        account_id: str,
        unit: DistanceUnit,
        types: Optional[List[ActivityType]] = None,
        days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ActivityStats:
        """Aggregate the filtered records in the display unit."""
        records = await self.list_activities(account_id, unit, types=types, days=days, now=now)
        return ActivityStats(
            unit=unit,
            activity_count=len(records),
            total_distance=aggregation.total_distance(records),
            total_duration=aggregation.total_duration(records),
            total_maintenance_cost=aggregation.total_maintenance_cost(records),
            average_speed=aggregation.average_speed(records),
            daily_totals=aggregation.daily_totals(aggregation.group_by_day(records)),
        )

    # =========================================================================
    # CSV
    # =========================================================================

    async def export_csv(self, account_id: str) -> str:
        activities = await self._activities.list_for_account(account_id)
        return csv_io.export_csv(to_record(a) for a in activities)

    async def import_csv(self, account_id: str, text: str, mode: ImportMode) -> ImportResult:
        """
        Import a CSV export.

        ``replace`` leaves exactly the imported records; ``merge`` adds
        imported records whose id the account does not already have.

        Raises:
            ValidationError: INVALID_CSV
        """
        parsed = csv_io.parse_csv(text)
        skipped = parsed.skipped

        if mode == ImportMode.REPLACE:
            imported = await self._replace_all(account_id, parsed.records)
        else:
            existing = await self._activities.ids_for_account(account_id)
            fresh = [r for r in parsed.records if r.id not in existing]
            skipped += len(parsed.records) - len(fresh)
            await self._activities.add_many([_from_record(account_id, r) for r in fresh])
            imported = len(fresh)

        total = await self._activities.count_for_account(account_id)
        logger.info(
            f"Imported {imported} activities ({mode.value}) for account {account_id}, "
            f"skipped {skipped}"
        )
        return ImportResult(mode=mode, imported=imported, skipped=skipped, total=total)

    # =========================================================================
    # Cloud sync
    # =========================================================================

    async def upload(self, account: Account, records: List[ActivityRecord]) -> int:
        """
        Replace the account's stored records with ``records`` (canonical units).

        Raises:
            AuthorizationError: PREMIUM_REQUIRED
        """
        ensure_premium(account)
        return await self._replace_all(account.id, _unique_by_id(records))

    async def download(self, account: Account) -> List[ActivityRecord]:
        """
        Raises:
            AuthorizationError: PREMIUM_REQUIRED
        """
        ensure_premium(account)
        return [to_record(a) for a in await self._activities.list_for_account(account.id)]
