"""
Stripe payments and membership access grants.

The browser only ever confirms a card against a PaymentIntent. Access is
granted here, after the server has read a "succeeded" status from Stripe
itself (verify endpoint, return page or webhook).
"""
import logging

import stripe
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from integrations import mailjet
from .models import Payment

logger = logging.getLogger(__name__)

User = get_user_model()

# amounts in cents
PLANS = {
    "community": 9700,
    "consult": 29700,
}

SUCCEEDED = "succeeded"


class PaymentsNotConfigured(Exception):
    pass


class WebhookNotConfigured(PaymentsNotConfigured):
    pass


class InvalidPlan(ValueError):
    pass


def is_configured():
    return bool(settings.STRIPE_SECRET_KEY)


def _api_key():
    if not is_configured():
        raise PaymentsNotConfigured("STRIPE_SECRET_KEY is not configured")
    return settings.STRIPE_SECRET_KEY


def plan_amount(plan):
    try:
        return PLANS[plan]
    except (KeyError, TypeError):
        raise InvalidPlan(f"Unknown plan: {plan!r}")


def intent_metadata(intent):
    """The intent metadata as a plain dict."""
    metadata = intent.metadata
    if metadata is None:
        return {}
    if isinstance(metadata, stripe.StripeObject):
        return metadata.to_dict()
    return dict(metadata)


def record_intent(intent, user=None):
    """Create or refresh the local Payment row for a Stripe PaymentIntent."""
    metadata = intent_metadata(intent)
    defaults = {
        "email": metadata.get("email", ""),
        "plan": metadata.get("plan", ""),
        "amount": intent.amount,
        "currency": getattr(intent, "currency", "usd") or "usd",
        "status": intent.status,
    }
    if user is not None:
        defaults["user"] = user
    payment, _ = Payment.objects.update_or_create(
        stripe_payment_intent_id=intent.id,
        defaults=defaults,
    )
    return payment


def create_payment_intent(plan, email, user=None):
    amount = plan_amount(plan)
    intent = stripe.PaymentIntent.create(
        amount=amount,
        currency="usd",
        metadata={"plan": plan, "email": email},
        receipt_email=email,
        api_key=_api_key(),
    )
    record_intent(intent, user=user)
    logger.info("Created payment intent %s for %s (%s)", intent.id, email, plan)
    return intent


def retrieve_payment_intent(payment_intent_id):
    return stripe.PaymentIntent.retrieve(payment_intent_id, api_key=_api_key())


def verify_payment(payment_intent_id):
    """
    Read the intent back from Stripe and grant access if it has succeeded.

    Returns (intent, payment).
    """
    intent = retrieve_payment_intent(payment_intent_id)
    payment = record_intent(intent)
    if payment.status == SUCCEEDED:
        grant_access(payment)
    return intent, payment


def construct_webhook_event(payload, signature):
    if not settings.STRIPE_WEBHOOK_SECRET:
        raise WebhookNotConfigured("STRIPE_WEBHOOK_SECRET is not configured")
    return stripe.Webhook.construct_event(payload, signature, settings.STRIPE_WEBHOOK_SECRET)


def handle_webhook_event(event):
    """
    The event body only names the intent. Status, plan and amount are read
    back from Stripe before anything is granted.
    """
    if event["type"] != "payment_intent.succeeded":
        return None
    _, payment = verify_payment(event["data"]["object"]["id"])
    return payment


def grant_access(payment):
    """
    Unlock the dashboard for the payment's email. Safe to call repeatedly,
    only the first call for a payment changes anything.

    Returns True when this call granted access.
    """
    if payment.status != SUCCEEDED:
        return False
    if payment.plan not in PLANS:
        logger.error("Payment %s has no known plan, not granting access", payment.stripe_payment_intent_id)
        return False
    if payment.amount != PLANS[payment.plan]:
        logger.error("Payment %s paid %s for %s, expected %s; not granting access",
                     payment.stripe_payment_intent_id, payment.amount, payment.plan, PLANS[payment.plan])
        return False

    with transaction.atomic():
        payment = Payment.objects.select_for_update().get(pk=payment.pk)
        if payment.access_granted_at:
            return False

        user = payment.user or User.objects.filter(email__iexact=payment.email).first()
        if user is None:
            # paid through the API without an account; they set a password later
            user = User.objects.create_user(email=payment.email, password=None)

        user.has_community_access = True
        if payment.plan == "consult":
            user.has_consult_access = True
            user.membership_type = User.MEMBERSHIP_CONSULT
        elif user.membership_type != User.MEMBERSHIP_CONSULT:
            user.membership_type = User.MEMBERSHIP_COMMUNITY
        user.save(update_fields=["has_community_access", "has_consult_access", "membership_type"])

        payment.user = user
        payment.access_granted_at = timezone.now()
        payment.save(update_fields=["user", "access_granted_at", "updated_at"])

    logger.info("Granted %s access to %s", payment.plan, user.email)

    if payment.plan == "consult":
        mailjet.send_consult_confirmation_email(user.email, user.display_name)
    else:
        mailjet.send_welcome_email(user.email, user.display_name)
    return True
