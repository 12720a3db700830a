"""
Admin API Routes

Account administration for managers and admins, and pricing catalog
replacement for admins. The caller's role is read from storage on each
request.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, status

from ridewitus.api.dependencies import (
    AccountDirectoryDep,
    CurrentAccountDep,
    PricingCatalogDep,
)
from ridewitus.domain.accounts import to_read
from ridewitus.domain.models import (
    AccountListResponse,
    AccountResponse,
    CamelModel,
    MessageResponse,
    PricingTierSchema,
    Role,
    SubscriptionStatus,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


class AccountCreateRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role: Role = Role.USER


class AccountUpdateRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[Role] = None
    subscription_status: Optional[SubscriptionStatus] = None


# =============================================================================
# Accounts
# =============================================================================

@router.get("/accounts", response_model=AccountListResponse)
async def list_accounts(caller: CurrentAccountDep, directory: AccountDirectoryDep):
    """All accounts, newest first."""
    accounts = await directory.list_accounts(caller)
    return AccountListResponse(users=[to_read(a) for a in accounts])


@router.post("/accounts", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    request: AccountCreateRequest,
    caller: CurrentAccountDep,
    directory: AccountDirectoryDep,
):
    account = await directory.create_account(
        caller,
        email=request.email,
        password=request.password,
        name=request.name,
        role=request.role,
    )
    return AccountResponse(user=to_read(account))


@router.put("/accounts/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: str,
    request: AccountUpdateRequest,
    caller: CurrentAccountDep,
    directory: AccountDirectoryDep,
):
    account = await directory.update_account(
        caller,
        account_id,
        name=request.name,
        email=request.email,
        role=request.role,
        subscription_status=request.subscription_status,
    )
    return AccountResponse(user=to_read(account))


@router.delete("/accounts/{account_id}", response_model=MessageResponse)
async def delete_account(
    account_id: str,
    caller: CurrentAccountDep,
    directory: AccountDirectoryDep,
):
    await directory.delete_account_as(caller, account_id)
    return MessageResponse(message="Account deleted")


# =============================================================================
# Pricing
# =============================================================================

@router.put("/pricing", response_model=List[PricingTierSchema])
async def replace_pricing(
    tiers: List[PricingTierSchema],
    caller: CurrentAccountDep,
    catalog: PricingCatalogDep,
):
    """Replace the whole pricing catalog."""
    return await catalog.replace(caller, tiers)
