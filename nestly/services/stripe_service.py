"""
Stripe Service - subscription checkout sessions for listings
"""
import asyncio
import logging
from functools import partial
from typing import Optional, Dict
import stripe
from nestly.config import settings

logger = logging.getLogger(__name__)

# billingCycle -> (interval, interval_count)
BILLING_INTERVALS = {
    "month": ("month", 1),
    "3months": ("month", 3),
    "year": ("year", 1),
}


def stripe_enabled() -> bool:
    """True only when STRIPE_SECRET_KEY is set"""
    return bool(settings.STRIPE_SECRET_KEY)


def _init_stripe() -> None:
    if not stripe_enabled():
        raise RuntimeError("Stripe is not configured")
    stripe.api_key = settings.STRIPE_SECRET_KEY


def billing_interval(billing_cycle: Optional[str]):
    """Unknown cycles bill monthly"""
    return BILLING_INTERVALS.get(billing_cycle or "month", BILLING_INTERVALS["month"])


def create_checkout_session_sync(
    listing_id: str,
    listing_title: str,
    amount: float,
    currency: str,
    billing_cycle: str,
    customer_email: Optional[str] = None,
    customer_name: Optional[str] = None,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
) -> Dict[str, str]:
    """
    Create a subscription-mode Checkout Session (synchronous) and return {sessionId, url}.

    Raises RuntimeError when Stripe is not configured.
    """
    _init_stripe()

    interval, interval_count = billing_interval(billing_cycle)
    amount_in_cents = int(round(amount * 100))
    base_url = settings.APP_BASE_URL.rstrip("/")

    session = stripe.checkout.Session.create(
        payment_method_types=["card"],
        mode="subscription",
        customer_email=customer_email,
        line_items=[
            {
                "price_data": {
                    "currency": currency.lower(),
                    "product_data": {
                        "name": listing_title,
                        "description": f"Subscription for {listing_title} - {billing_cycle}",
                    },
                    "unit_amount": amount_in_cents,
                    "recurring": {
                        "interval": interval,
                        "interval_count": interval_count,
                    },
                },
                "quantity": 1,
            }
        ],
        metadata={
            "listingId": listing_id,
            "billingCycle": billing_cycle,
            "customerName": customer_name or "",
        },
        success_url=success_url or f"{base_url}/listings/{listing_id}?success=true",
        cancel_url=cancel_url or f"{base_url}/listings/{listing_id}?canceled=true",
    )

    logger.info(f"Checkout session {session.id} created for listing {listing_id} ({billing_cycle})")
    return {"sessionId": session.id, "url": session.url}


async def create_checkout_session(**kwargs) -> Dict[str, str]:
    """Async wrapper for creating a checkout session"""
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, partial(create_checkout_session_sync, **kwargs))
