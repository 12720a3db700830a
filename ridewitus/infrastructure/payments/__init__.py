"""
Payments Infrastructure Module

Stripe customer, checkout and cancellation services.
"""

from ridewitus.infrastructure.payments.stripe_service import StripeService

__all__ = ["StripeService"]
