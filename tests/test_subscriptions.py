"""
Integration Tests for Subscription Checkout

Stripe is replaced by the ``mock_billing`` fixture.
"""

from unittest.mock import MagicMock, patch

import pytest
from stripe import StripeError

from ridewitus.infrastructure.exceptions import BillingError, ConfigurationError
from ridewitus.infrastructure.payments.stripe_service import StripeService


class TestCheckout:

    def test_creates_customer_once_and_returns_session(self, login, seed_pricing, mock_billing):
        rider = login()

        first = rider.post("/api/subscription/checkout", json={"tierId": "monthly"})
        second = rider.post("/api/subscription/checkout", json={"tierId": "annual"})

        assert first.status_code == 200
        assert first.json() == {"sessionId": "cs_test_123", "url": "https://checkout.stripe.test/cs_test_123"}
        assert second.status_code == 200
        mock_billing.create_customer.assert_awaited_once()
        last_call = mock_billing.create_checkout_session.await_args
        assert last_call.kwargs["customer_id"] == "cus_test_123"
        assert last_call.kwargs["price_id"] == "price_annual"
        assert last_call.kwargs["tier_id"] == "annual"

    def test_free_tier_cannot_be_purchased(self, login, seed_pricing, mock_billing):
        rider = login()
        response = rider.post("/api/subscription/checkout", json={"tierId": "free"})
        assert response.status_code == 400
        assert response.json()["errorCode"] == "MISSING_PRICE_REFERENCE"
        mock_billing.create_checkout_session.assert_not_awaited()

    def test_unknown_tier(self, login, seed_pricing):
        rider = login()
        response = rider.post("/api/subscription/checkout", json={"tierId": "platinum"})
        assert response.status_code == 404
        assert response.json()["errorCode"] == "PRICING_TIER_NOT_FOUND"

    def test_billing_failure(self, login, seed_pricing, mock_billing):
        mock_billing.create_customer.side_effect = BillingError("card network down")
        rider = login()
        response = rider.post("/api/subscription/checkout", json={"tierId": "monthly"})
        assert response.status_code == 500
        assert response.json()["errorCode"] == "BILLING_ERROR"


class TestStripeService:

    async def test_requires_api_key(self):
        service = StripeService(api_key=None)
        service._api_key = None
        with pytest.raises(ConfigurationError):
            await service.create_customer("acct-1", "a@example.com")

    async def test_stripe_errors_become_billing_errors(self):
        service = StripeService(api_key="sk_test_dummy")
        with patch("stripe.Customer.create", side_effect=StripeError("declined")):
            with pytest.raises(BillingError):
                await service.create_customer("acct-1", "a@example.com")

    async def test_cancel_customer_subscriptions(self):
        service = StripeService(api_key="sk_test_dummy")
        listing = MagicMock()
        listing.auto_paging_iter.return_value = [MagicMock(id="sub_1"), MagicMock(id="sub_2")]
        with patch("stripe.Subscription.list", return_value=listing), \
                patch("stripe.Subscription.cancel") as cancel:
            cancelled = await service.cancel_customer_subscriptions("cus_1")

        assert cancelled == ["sub_1", "sub_2"]
        assert cancel.call_count == 2
