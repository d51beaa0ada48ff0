"""
Thin wrapper around the Razorpay client.

Checkout asks for an authorization (a Razorpay order the browser then pays
against) and the webhook view asks whether a delivery is genuine. Nothing
else in the project talks to the processor.
"""
import logging
from collections import namedtuple

import razorpay
from django.conf import settings

from storefront.exceptions import PaymentAuthFailed, SignatureInvalid

logger = logging.getLogger(__name__)

# simple client (uses keys from settings.py)
razorpay_client = razorpay.Client(
    auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
)

PaymentAuthorization = namedtuple(
    "PaymentAuthorization", ["reference", "client_secret", "amount", "currency", "key_id"]
)


def create_authorization(amount_minor, notes, receipt=None):
    """
    Create a processor order for `amount_minor` (paise/cents).

    `notes` travel with the processor order and come back on every webhook,
    which is how a payment is reconciled with the cart it was made from.
    """
    payload = {
        "amount": amount_minor,
        "currency": settings.PAYMENT_CURRENCY,
        "payment_capture": 1,
        "notes": {k: str(v) for k, v in notes.items()},
    }
    if receipt:
        payload["receipt"] = receipt

    try:
        processor_order = razorpay_client.order.create(payload)
    except (razorpay.errors.BadRequestError, razorpay.errors.GatewayError) as exc:
        logger.warning("Payment authorization rejected: %s", exc)
        raise PaymentAuthFailed(f"Payment authorization failed: {exc}")

    reference = processor_order.get("id")
    if not reference:
        logger.error("Processor returned an order without an id: %r", processor_order)
        raise RuntimeError("Unexpected payment processor response")

    logger.info("Payment authorization %s created for %s minor units", reference, amount_minor)
    # Razorpay checkout is opened with the order id, which doubles as the
    # client-side secret.
    return PaymentAuthorization(
        reference=reference,
        client_secret=reference,
        amount=amount_minor,
        currency=processor_order.get("currency", settings.PAYMENT_CURRENCY),
        key_id=settings.RAZORPAY_KEY_ID,
    )


def verify_webhook(body, signature):
    if not signature:
        logger.warning("Webhook delivery without signature header")
        raise SignatureInvalid("Missing signature")
    try:
        razorpay_client.utility.verify_webhook_signature(
            body, signature, settings.RAZORPAY_WEBHOOK_SECRET
        )
    except razorpay.errors.SignatureVerificationError:
        logger.warning("Webhook signature verification failed")
        raise SignatureInvalid("Invalid signature")
