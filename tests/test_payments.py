import hashlib
import hmac
import json
import time
from unittest.mock import patch

import pytest

from funnel import payments
from funnel.models import Payment
from tests.conftest import make_intent

pytestmark = pytest.mark.django_db


def test_invalid_plan_is_rejected_before_stripe(api_client, stripe_configured):
    with patch('stripe.PaymentIntent.create') as create:
        response = api_client.post('/api/create-payment-intent', {'plan': 'platinum', 'email': 'a@example.com'},
                                   format='json')

    assert response.status_code == 400
    assert response.json() == {'error': 'Invalid plan'}
    create.assert_not_called()


def test_unconfigured_stripe_is_unavailable(api_client):
    with patch('stripe.PaymentIntent.create') as create:
        response = api_client.post('/api/create-payment-intent', {'plan': 'community', 'email': 'a@example.com'},
                                   format='json')
    assert response.status_code == 503
    create.assert_not_called()


@pytest.mark.parametrize('plan, amount', [('community', 9700), ('consult', 29700)])
def test_plan_amounts(api_client, stripe_configured, plan, amount):
    intent = make_intent(plan=plan, email='a@example.com', intent_id=f'pi_{plan}')
    with patch('stripe.PaymentIntent.create', return_value=intent) as create:
        response = api_client.post('/api/create-payment-intent', {'plan': plan, 'email': 'a@example.com'},
                                   format='json')

    assert response.status_code == 200
    assert response.json() == {'clientSecret': intent.client_secret}
    kwargs = create.call_args.kwargs
    assert kwargs['amount'] == amount
    assert kwargs['currency'] == 'usd'
    assert kwargs['metadata'] == {'plan': plan, 'email': 'a@example.com'}
    assert Payment.objects.get(stripe_payment_intent_id=f'pi_{plan}').amount == amount


def test_stripe_failure_is_a_500(api_client, stripe_configured):
    with patch('stripe.PaymentIntent.create', side_effect=RuntimeError('card network down')):
        response = api_client.post('/api/create-payment-intent', {'plan': 'community', 'email': 'a@example.com'},
                                   format='json')
    assert response.status_code == 500
    assert response.json() == {'error': 'Failed to create payment intent'}


def test_verify_payment_grants_access(api_client, stripe_configured, django_user_model):
    intent = make_intent(plan='consult', email='new@example.com', status='succeeded')
    with patch('stripe.PaymentIntent.retrieve', return_value=intent):
        response = api_client.post('/api/verify-payment', {'paymentIntentId': intent.id}, format='json')

    assert response.status_code == 200
    assert response.json() == {
        'status': 'succeeded',
        'amount': 29700,
        'metadata': {'plan': 'consult', 'email': 'new@example.com'},
    }
    user = django_user_model.objects.get(email='new@example.com')
    assert user.has_community_access
    assert user.has_consult_access
    assert user.membership_type == 'consult'
    assert not user.has_usable_password()


def test_verify_payment_requires_an_id(api_client, stripe_configured):
    response = api_client.post('/api/verify-payment', {}, format='json')
    assert response.status_code == 400


def test_unfinished_payment_grants_nothing(stripe_configured, user):
    intent = make_intent(plan='community', email=user.email, status='processing')
    with patch('stripe.PaymentIntent.retrieve', return_value=intent):
        _, payment = payments.verify_payment(intent.id)

    user.refresh_from_db()
    assert payment.status == 'processing'
    assert payment.access_granted_at is None
    assert not user.has_community_access


def test_grant_access_is_idempotent(user):
    payment = payments.record_intent(make_intent(plan='community', email=user.email, status='succeeded'))

    with patch('integrations.mailjet.MailjetClient.send', return_value=True) as send:
        assert payments.grant_access(payment) is True
        assert payments.grant_access(payment) is False

    assert send.call_count == 1
    user.refresh_from_db()
    assert user.has_community_access
    assert not user.has_consult_access
    assert user.membership_type == 'community'


def test_community_purchase_keeps_consult_membership(user):
    user.has_consult_access = True
    user.membership_type = user.MEMBERSHIP_CONSULT
    user.save()

    payment = payments.record_intent(make_intent(plan='community', email=user.email, status='succeeded'))
    payments.grant_access(payment)

    user.refresh_from_db()
    assert user.membership_type == 'consult'
    assert user.has_consult_access


def test_verify_payment_reads_stripe_metadata_objects(api_client, stripe_configured):
    created = make_intent(plan='community', email='obj@example.com', intent_id='pi_obj')
    with patch('stripe.PaymentIntent.create', return_value=created):
        response = api_client.post('/api/create-payment-intent', {'plan': 'community', 'email': 'obj@example.com'},
                                   format='json')
    assert response.status_code == 200

    paid = make_intent(plan='community', email='obj@example.com', status='succeeded', intent_id='pi_obj')
    with patch('stripe.PaymentIntent.retrieve', return_value=paid):
        response = api_client.post('/api/verify-payment', {'paymentIntentId': 'pi_obj'}, format='json')

    assert response.status_code == 200
    assert response.json()['metadata'] == {'plan': 'community', 'email': 'obj@example.com'}
    payment = Payment.objects.get(stripe_payment_intent_id='pi_obj')
    assert payment.plan == 'community'
    assert payment.email == 'obj@example.com'
    assert payment.access_granted_at is not None


def test_underpaid_intent_grants_nothing(user):
    payment = payments.record_intent(make_intent(plan='consult', email=user.email, status='succeeded', amount=100))

    assert payments.grant_access(payment) is False
    user.refresh_from_db()
    assert not user.has_community_access
    assert not user.has_consult_access


WEBHOOK_SECRET = 'whsec_test'


def signed_event(intent_id, secret=WEBHOOK_SECRET, **object_fields):
    payload = json.dumps({
        'id': 'evt_1',
        'object': 'event',
        'type': 'payment_intent.succeeded',
        'data': {'object': {'id': intent_id, 'object': 'payment_intent', **object_fields}},
    })
    timestamp = int(time.time())
    digest = hmac.new(secret.encode(), f'{timestamp}.{payload}'.encode(), hashlib.sha256).hexdigest()
    return payload.encode(), f't={timestamp},v1={digest}'


def test_webhook_grants_access(client, user, stripe_configured):
    stripe_configured.STRIPE_WEBHOOK_SECRET = WEBHOOK_SECRET
    body, signature = signed_event('pi_hook')
    intent = make_intent(plan='community', email=user.email, status='succeeded', intent_id='pi_hook')

    with patch('stripe.PaymentIntent.retrieve', return_value=intent) as retrieve:
        response = client.post('/api/stripe/webhook', data=body, content_type='application/json',
                               HTTP_STRIPE_SIGNATURE=signature)

    assert response.status_code == 200
    assert json.loads(response.content) == {'received': True}
    assert retrieve.call_args.args[0] == 'pi_hook'
    user.refresh_from_db()
    assert user.has_community_access
    assert Payment.objects.get(stripe_payment_intent_id='pi_hook').access_granted_at is not None


def test_webhook_trusts_stripe_over_the_event_body(client, user, stripe_configured):
    stripe_configured.STRIPE_WEBHOOK_SECRET = WEBHOOK_SECRET
    body, signature = signed_event('pi_hook', amount=1, status='succeeded',
                                   metadata={'plan': 'consult', 'email': user.email})
    intent = make_intent(plan='consult', email=user.email, status='requires_payment_method', intent_id='pi_hook')

    with patch('stripe.PaymentIntent.retrieve', return_value=intent):
        response = client.post('/api/stripe/webhook', data=body, content_type='application/json',
                               HTTP_STRIPE_SIGNATURE=signature)

    assert response.status_code == 200
    user.refresh_from_db()
    assert not user.has_consult_access
    assert Payment.objects.get(stripe_payment_intent_id='pi_hook').access_granted_at is None


def test_unsigned_webhook_is_refused_without_a_secret(client, user, stripe_configured):
    body = json.dumps({
        'type': 'payment_intent.succeeded',
        'data': {'object': {'id': 'pi_forged', 'amount': 1, 'status': 'succeeded',
                            'metadata': {'plan': 'consult', 'email': user.email}}},
    })

    with patch('stripe.PaymentIntent.retrieve') as retrieve:
        response = client.post('/api/stripe/webhook', data=body, content_type='application/json')

    assert response.status_code == 503
    retrieve.assert_not_called()
    user.refresh_from_db()
    assert not user.has_community_access
    assert not user.has_consult_access
    assert not Payment.objects.filter(stripe_payment_intent_id='pi_forged').exists()


def test_webhook_ignores_other_events():
    assert payments.handle_webhook_event({'type': 'charge.refunded', 'data': {'object': {}}}) is None


def test_webhook_with_bad_signature_is_rejected(client, settings):
    settings.STRIPE_WEBHOOK_SECRET = WEBHOOK_SECRET
    body, _ = signed_event('pi_hook')
    _, forged = signed_event('pi_hook', secret='whsec_other')
    response = client.post('/api/stripe/webhook', data=body, content_type='application/json',
                           HTTP_STRIPE_SIGNATURE=forged)
    assert response.status_code == 400
