"""
Cloud Sync API Routes

Full upload and download of the caller's activities for premium
(monthly/annual) subscribers. Distances are canonical.
"""

import logging
from typing import List

from fastapi import APIRouter

from ridewitus.api.dependencies import ActivityServiceDep, CurrentAccountDep
from ridewitus.domain.models import (
    ActivityRecord,
    CamelModel,
    SyncDownloadResponse,
    SyncUploadResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sync")


class SyncUploadRequest(CamelModel):
    activities: List[ActivityRecord]


@router.post("/upload", response_model=SyncUploadResponse)
async def upload(request: SyncUploadRequest, account: CurrentAccountDep, service: ActivityServiceDep):
    """Replace the stored activities with the uploaded set."""
    count = await service.upload(account, request.activities)
    logger.info(f"Account {account.id} uploaded {count} activities")
    return SyncUploadResponse(count=count)


@router.get("/download", response_model=SyncDownloadResponse)
async def download(account: CurrentAccountDep, service: ActivityServiceDep):
    return SyncDownloadResponse(activities=await service.download(account))
