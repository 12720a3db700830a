"""
API Dependencies

FastAPI dependency injection for the session identity, the caller's
account, domain services and the session cookie.

The identity is resolved once per request by ``SessionCookieMiddleware``;
dependencies here only read it from ``request.state``. Role-gated routes
load the caller's account from storage so that role changes apply on the
next request.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Query, Request, Response

from ridewitus.config.settings import get_settings
from ridewitus.domain.accounts import AccountDirectory
from ridewitus.domain.activities import ActivityService
from ridewitus.domain.models import DistanceUnit
from ridewitus.domain.pricing import PricingCatalog
from ridewitus.infrastructure.db.dependencies import (
    AccountRepoDep,
    ActivityRepoDep,
    PricingTierRepoDep,
)
from ridewitus.infrastructure.db.models.account import Account
from ridewitus.infrastructure.exceptions import AuthenticationError, ErrorCode
from ridewitus.infrastructure.payments.stripe_service import (
    StripeService,
    get_stripe_service,
)
from ridewitus.infrastructure.security.passwords import get_password_hasher
from ridewitus.infrastructure.security.tokens import (
    TOKEN_TTL,
    SessionIdentity,
    get_token_service,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Session cookie
# =============================================================================

def set_auth_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=int(TOKEN_TTL.total_seconds()),
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def clear_auth_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


# =============================================================================
# Identity
# =============================================================================

def get_optional_identity(request: Request) -> Optional[SessionIdentity]:
    """Identity placed on the request by the session middleware, if any."""
    return getattr(request.state, "identity", None)


def get_current_identity(
    identity: Optional[SessionIdentity] = Depends(get_optional_identity),
) -> SessionIdentity:
    """
    Require an authenticated session.

    Raises:
        AuthenticationError: NOT_AUTHENTICATED
    """
    if identity is None:
        raise AuthenticationError("Not authenticated", error_code=ErrorCode.NOT_AUTHENTICATED)
    return identity


IdentityDep = Annotated[SessionIdentity, Depends(get_current_identity)]


# =============================================================================
# Services
# =============================================================================

def get_billing_service() -> StripeService:
    return get_stripe_service()


BillingDep = Annotated[StripeService, Depends(get_billing_service)]


def get_account_directory(accounts: AccountRepoDep, billing: BillingDep) -> AccountDirectory:
    return AccountDirectory(
        accounts=accounts,
        hasher=get_password_hasher(),
        tokens=get_token_service(),
        billing=billing,
    )


def get_activity_service(activities: ActivityRepoDep) -> ActivityService:
    return ActivityService(activities)


def get_pricing_catalog(tiers: PricingTierRepoDep) -> PricingCatalog:
    return PricingCatalog(tiers)


AccountDirectoryDep = Annotated[AccountDirectory, Depends(get_account_directory)]
ActivityServiceDep = Annotated[ActivityService, Depends(get_activity_service)]
PricingCatalogDep = Annotated[PricingCatalog, Depends(get_pricing_catalog)]


async def get_current_account(identity: IdentityDep, directory: AccountDirectoryDep) -> Account:
    """
    Load the caller's account from storage.

    Raises:
        NotFoundError: USER_NOT_FOUND when the account was deleted after
            the token was issued
    """
    return await directory.get_by_id(identity.account_id)


CurrentAccountDep = Annotated[Account, Depends(get_current_account)]

UnitQuery = Annotated[
    DistanceUnit,
    Query(description="Display unit for distances"),
]
