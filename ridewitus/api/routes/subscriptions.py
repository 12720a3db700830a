"""
Subscription API Routes

Starts a Stripe Checkout session for a priced pricing tier. The account's
Stripe customer is created on first checkout and reused afterwards.
"""

import logging

from fastapi import APIRouter

from ridewitus.api.dependencies import BillingDep, CurrentAccountDep, PricingCatalogDep
from ridewitus.domain.models import CamelModel, CheckoutResponse
from ridewitus.infrastructure.db.dependencies import AccountRepoDep
from ridewitus.infrastructure.exceptions import ErrorCode, ValidationError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscription")


class CheckoutRequest(CamelModel):
    tier_id: str


# =============================================================================
# Checkout Endpoints
# =============================================================================

@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout_session(
    request: CheckoutRequest,
    account: CurrentAccountDep,
    catalog: PricingCatalogDep,
    billing: BillingDep,
    accounts: AccountRepoDep,
):
    """
    Create a Stripe Checkout session for a pricing tier.

    Raises:
        NotFoundError: PRICING_TIER_NOT_FOUND
        ValidationError: MISSING_PRICE_REFERENCE for free or unpriced tiers
        BillingError: Stripe rejected the request
    """
    tier = await catalog.get(request.tier_id)
    if not tier.is_priced or not tier.stripe_price_id:
        raise ValidationError(
            f"Pricing tier '{tier.name}' cannot be purchased",
            error_code=ErrorCode.MISSING_PRICE_REFERENCE,
        )

    customer_id = account.stripe_customer_id
    if not customer_id:
        customer_id = await billing.create_customer(account.id, account.email, account.name)
        account.stripe_customer_id = customer_id
        await accounts.save(account)

    session = await billing.create_checkout_session(
        customer_id=customer_id,
        price_id=tier.stripe_price_id,
        account_id=account.id,
        tier_id=tier.id,
    )
    logger.info(f"Created checkout session {session.id} for account {account.id}")
    return CheckoutResponse(session_id=session.id, url=session.url)
