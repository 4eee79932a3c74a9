import logging

import stripe
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from integrations.status import integration_status
from . import ai, payments
from .chat import ChatStore, ChatBusy

logger = logging.getLogger(__name__)


@api_view(['GET'])
def health(request):
    return Response({
        'status': 'ok',
        'message': 'Debt Eraser Pro Server Running',
        'integrations': integration_status(),
    })


def _valid_answers(answers):
    if not isinstance(answers, list):
        return False
    for item in answers:
        if not isinstance(item, dict):
            return False
        if not isinstance(item.get('question'), str) or not isinstance(item.get('answer'), str):
            return False
    return True


@api_view(['POST'])
def analyze_quiz(request):
    answers = request.data.get('answers')
    if not _valid_answers(answers):
        return Response({'error': 'Invalid answers format'}, status=status.HTTP_400_BAD_REQUEST)

    outcome = ai.analyze_quiz(answers)
    body = outcome.result.as_response()
    body['status'] = outcome.status
    return Response(body)


@api_view(['POST'])
def chat(request):
    message = request.data.get('message')
    if not isinstance(message, str) or not message.strip():
        return Response({'error': 'Message is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        session_id, reply, reply_status = ChatStore().send(request.data.get('sessionId'), message.strip())
    except ChatBusy:
        return Response({'error': 'A reply is already in progress'}, status=status.HTTP_409_CONFLICT)
    return Response({'reply': reply['text'], 'sessionId': session_id, 'status': reply_status})


@api_view(['POST'])
def create_payment_intent(request):
    plan = request.data.get('plan')
    email = request.data.get('email')

    if plan not in payments.PLANS:
        return Response({'error': 'Invalid plan'}, status=status.HTTP_400_BAD_REQUEST)
    if not email:
        return Response({'error': 'Email is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        intent = payments.create_payment_intent(plan, email)
    except payments.PaymentsNotConfigured:
        return Response({'error': 'Payments are not configured'}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    except Exception:
        logger.exception("Payment intent error")
        return Response({'error': 'Failed to create payment intent'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'clientSecret': intent.client_secret})


@api_view(['POST'])
def verify_payment(request):
    payment_intent_id = request.data.get('paymentIntentId')
    if not payment_intent_id:
        return Response({'error': 'paymentIntentId is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        intent, payment = payments.verify_payment(payment_intent_id)
    except payments.PaymentsNotConfigured:
        return Response({'error': 'Payments are not configured'}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    except Exception:
        logger.exception("Payment verification error")
        return Response({'error': 'Failed to verify payment'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'status': intent.status,
        'amount': intent.amount,
        'metadata': payments.intent_metadata(intent),
    })


@csrf_exempt
@require_POST
def stripe_webhook(request):
    """Stripe calls this directly; the signature header is the only credential."""
    try:
        event = payments.construct_webhook_event(request.body, request.META.get('HTTP_STRIPE_SIGNATURE', ''))
    except payments.WebhookNotConfigured:
        logger.error("Rejected Stripe webhook: STRIPE_WEBHOOK_SECRET is not set")
        return JsonResponse({'error': 'Webhook is not configured'}, status=503)
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.warning("Rejected Stripe webhook: %s", e)
        return JsonResponse({'error': 'Invalid webhook'}, status=400)

    try:
        payments.handle_webhook_event(event)
    except Exception:
        logger.exception("Stripe webhook handling failed for %s", getattr(event, "id", None))
        return JsonResponse({'error': 'Webhook handling failed'}, status=500)

    return JsonResponse({'received': True})
