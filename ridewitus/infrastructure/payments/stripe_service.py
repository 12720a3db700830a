"""
Stripe Payment Service

Infrastructure service for Stripe payment processing: customers, hosted
checkout sessions and subscription cancellation on account deletion.
Subscription changes pushed back by Stripe webhooks are handled elsewhere.
"""

import logging
from typing import List, Optional

import stripe
from stripe import StripeError

from ridewitus.config.settings import get_settings
from ridewitus.infrastructure.exceptions import BillingError, ConfigurationError


logger = logging.getLogger(__name__)


class StripeService:
    """
    Stripe payment processing service.

    All methods are stateless; the API key is read from settings once.
    """

    def __init__(self, api_key: Optional[str] = None, app_url: Optional[str] = None):
        settings = get_settings()
        self._api_key = api_key or settings.stripe_secret_key
        self._app_url = (app_url or settings.app_url).rstrip("/")

        if self._api_key:
            stripe.api_key = self._api_key

    def _require_api_key(self) -> None:
        if not self._api_key:
            raise ConfigurationError(
                "Billing is not configured",
                missing_keys=["STRIPE_SECRET_KEY"],
            )

    # =========================================================================
    # Customer Management
    # =========================================================================

    async def create_customer(
        self,
        account_id: str,
        email: str,
        name: Optional[str] = None,
    ) -> str:
        """
        Create a new Stripe customer.

        Args:
            account_id: Internal account ID (stored in metadata)
            email: Customer email for receipts
            name: Optional customer name

        Returns:
            Stripe customer ID
        """
        self._require_api_key()
        try:
            customer = stripe.Customer.create(
                email=email,
                name=name,
                metadata={
                    "user_id": account_id,
                    "source": "ridewitus",
                },
            )
            logger.info(f"Created Stripe customer {customer.id} for account {account_id}")
            return customer.id

        except StripeError as e:
            logger.error(f"Failed to create Stripe customer: {e}")
            raise BillingError(
                f"Failed to create customer: {e.user_message}",
                original_error=e,
            )

    # =========================================================================
    # Checkout Session
    # =========================================================================

    async def create_checkout_session(
        self,
        customer_id: str,
        price_id: str,
        account_id: str,
        tier_id: str,
    ) -> stripe.checkout.Session:
        """
        Create a hosted Checkout Session for a subscription price.

        Returns:
            stripe.checkout.Session with ``id`` and ``url``
        """
        self._require_api_key()
        try:
            session = stripe.checkout.Session.create(
                customer=customer_id,
                payment_method_types=["card"],
                line_items=[
                    {
                        "price": price_id,
                        "quantity": 1,
                    }
                ],
                mode="subscription",
                success_url=f"{self._app_url}/subscription?success=true",
                cancel_url=f"{self._app_url}/subscription?canceled=true",
                metadata={
                    "user_id": account_id,
                    "plan_id": tier_id,
                },
            )

            logger.info(
                f"Created checkout session {session.id} for account {account_id}, "
                f"plan={tier_id}"
            )
            return session

        except StripeError as e:
            logger.error(f"Failed to create checkout session: {e}")
            raise BillingError(
                f"Failed to create checkout: {e.user_message}",
                original_error=e,
            )

    # =========================================================================
    # Subscription Cancellation
    # =========================================================================

    async def cancel_customer_subscriptions(self, customer_id: str) -> List[str]:
        """
        Cancel every subscription of a customer immediately.

        Returns:
            IDs of the cancelled subscriptions
        """
        self._require_api_key()
        cancelled = []
        try:
            subscriptions = stripe.Subscription.list(customer=customer_id)
            for subscription in subscriptions.auto_paging_iter():
                stripe.Subscription.cancel(subscription.id)
                cancelled.append(subscription.id)
        except StripeError as e:
            logger.error(f"Failed to cancel subscriptions for {customer_id}: {e}")
            raise BillingError(
                f"Failed to cancel subscriptions: {e.user_message}",
                original_error=e,
            )

        if cancelled:
            logger.info(f"Cancelled {len(cancelled)} subscription(s) for customer {customer_id}")
        return cancelled


# =============================================================================
# Singleton Instance (Dependency Injection Ready)
# =============================================================================

_stripe_service_instance: Optional[StripeService] = None


def get_stripe_service() -> StripeService:
    """Get or create Stripe service singleton."""
    global _stripe_service_instance

    if _stripe_service_instance is None:
        _stripe_service_instance = StripeService()

    return _stripe_service_instance
