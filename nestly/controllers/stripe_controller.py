import logging
from fastapi import APIRouter, Depends, status
from nestly.schemas.payment import CheckoutSessionRequest, CheckoutSessionResponse
from nestly.services.stripe_service import stripe_enabled, create_checkout_session
from nestly.utils.dependencies import get_current_user
from nestly.utils.errors import error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stripe", tags=["Payments"])


@router.post("/create-checkout-session", response_model=CheckoutSessionResponse)
async def create_checkout_session_endpoint(
    request: CheckoutSessionRequest,
    user: dict = Depends(get_current_user)
):
    """Create a Stripe subscription checkout for a listing"""
    if not stripe_enabled():
        return error_response("Stripe is not configured")

    try:
        return await create_checkout_session(
            listing_id=request.listingId,
            listing_title=request.listingTitle,
            amount=request.amount,
            currency=request.currency,
            billing_cycle=request.billingCycle,
            customer_email=request.customerEmail or user.get("email"),
            customer_name=request.customerName or user.get("name"),
            success_url=request.successUrl,
            cancel_url=request.cancelUrl,
        )
    except Exception as e:
        logger.error(f"Checkout session failed for listing {request.listingId}: {e}")
        return error_response("Failed to create checkout session", e, status.HTTP_500_INTERNAL_SERVER_ERROR)
