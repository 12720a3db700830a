"""
Activity API Routes

CRUD over the caller's activities, summary statistics, and CSV
import/export. Distances in requests and responses are in the ``unit``
query parameter (km by default); CSV files carry canonical distances.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, File, Form, Query, Response, UploadFile, status

from ridewitus.api.dependencies import ActivityServiceDep, CurrentAccountDep, UnitQuery
from ridewitus.domain.models import (
    ActivityCreate,
    ActivityRecord,
    ActivityStats,
    ActivityType,
    ActivityUpdate,
    CamelModel,
    DistanceUnit,
    ImportMode,
    ImportResult,
    MessageResponse,
)
from ridewitus.infrastructure.exceptions import ErrorCode, ValidationError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/activities")

EXPORT_FILENAME = "ridewitus-activities.csv"


class ClearResponse(CamelModel):
    success: bool = True
    deleted: int


# =============================================================================
# Collection
# =============================================================================

@router.get("", response_model=List[ActivityRecord])
async def list_activities(
    account: CurrentAccountDep,
    service: ActivityServiceDep,
    unit: UnitQuery = DistanceUnit.KM,
    types: Optional[List[ActivityType]] = Query(default=None, alias="type"),
    days: Optional[int] = Query(default=None, ge=1),
):
    """Activities newest first, optionally filtered by type and recency."""
    return await service.list_activities(account.id, unit, types=types, days=days)


@router.post("", response_model=ActivityRecord, status_code=status.HTTP_201_CREATED)
async def create_activity(
    payload: ActivityCreate,
    account: CurrentAccountDep,
    service: ActivityServiceDep,
    unit: UnitQuery = DistanceUnit.KM,
):
    return await service.create(account.id, payload, unit)


@router.delete("", response_model=ClearResponse)
async def clear_activities(account: CurrentAccountDep, service: ActivityServiceDep):
    """Delete every activity of the caller."""
    deleted = await service.clear(account.id)
    return ClearResponse(deleted=deleted)


@router.get("/stats", response_model=ActivityStats)
async def activity_stats(
    account: CurrentAccountDep,
    service: ActivityServiceDep,
    unit: UnitQuery = DistanceUnit.KM,
    types: Optional[List[ActivityType]] = Query(default=None, alias="type"),
    days: Optional[int] = Query(default=None, ge=1),
):
    return await service.stats(account.id, unit, types=types, days=days)


# =============================================================================
# CSV
# =============================================================================

@router.get("/export")
async def export_activities(account: CurrentAccountDep, service: ActivityServiceDep):
    content = await service.export_csv(account.id)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/import", response_model=ImportResult)
async def import_activities(
    account: CurrentAccountDep,
    service: ActivityServiceDep,
    file: UploadFile = File(..., description="CSV export file"),
    mode: ImportMode = Form(..., description="merge or replace"),
):
    """
    Import a CSV export.

    ``replace`` discards all existing activities first; ``merge`` only adds
    activities whose id is not already present.
    """
    raw = await file.read()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise ValidationError("CSV file must be UTF-8 encoded", error_code=ErrorCode.INVALID_CSV)

    return await service.import_csv(account.id, text, mode)


# =============================================================================
# Single activity
# =============================================================================

@router.put("/{activity_id}", response_model=ActivityRecord)
async def update_activity(
    activity_id: str,
    payload: ActivityUpdate,
    account: CurrentAccountDep,
    service: ActivityServiceDep,
    unit: UnitQuery = DistanceUnit.KM,
):
    return await service.update(account.id, activity_id, payload, unit)


@router.delete("/{activity_id}", response_model=MessageResponse)
async def delete_activity(activity_id: str, account: CurrentAccountDep, service: ActivityServiceDep):
    await service.delete(account.id, activity_id)
    return MessageResponse(message="Activity deleted")
