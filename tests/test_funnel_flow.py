import json
from unittest.mock import patch

import pytest

from funnel import ai
from funnel.models import Lead, Payment
from funnel.quiz import QUESTIONS
from tests.conftest import completion, make_intent

pytestmark = pytest.mark.django_db


def take_quiz(client):
    client.post('/quiz/start/')
    for question in QUESTIONS[:-1]:
        response = client.post('/quiz/', {'answer': question.options[1]})
        assert response.status_code == 302
        assert response['Location'] == '/quiz/'
    return client.post('/quiz/', {'answer': QUESTIONS[-1].options[1]})


def test_landing(client):
    response = client.get('/')
    assert response.status_code == 200
    assert b'Start My Free Analysis' in response.content


def test_invalid_answer_rerenders_question(client):
    client.post('/quiz/start/')
    response = client.post('/quiz/', {'answer': 'Something else'})
    assert response.status_code == 200
    assert QUESTIONS[0].text.encode() in response.content


def test_analyzing_screen_holds_for_minimum_time(client, settings):
    settings.ANALYSIS_MIN_DISPLAY_SECONDS = 60
    response = take_quiz(client)
    assert response['Location'] == '/quiz/analyzing/'

    analyzing = client.get('/quiz/analyzing/')
    assert analyzing.status_code == 200
    assert b'http-equiv="refresh"' in analyzing.content

    results = client.get('/quiz/results/')
    assert results.status_code == 302
    assert results['Location'] == '/quiz/analyzing/'


def test_results_without_quiz_go_back_to_quiz(client):
    response = client.get('/quiz/results/')
    assert response.status_code == 302
    assert response['Location'] == '/quiz/'


def test_full_funnel_ends_with_consult_access(client, stripe_configured, django_user_model):
    reply = json.dumps({'archetype': 'The Drowning Debtor', 'plan': 'Validate everything.',
                        'pdfStack': 'Collections & Repo Stax'})
    with patch('funnel.ai.get_client') as get_client:
        get_client.return_value.chat.completions.create.return_value = completion(reply)
        response = take_quiz(client)

    # the AI saw every answer in order
    prompt = get_client.return_value.chat.completions.create.call_args.kwargs['messages'][1]['content']
    assert prompt.count('\n- ') == len(QUESTIONS)

    assert client.get(response['Location'])['Location'] == '/quiz/results/'
    results = client.get('/quiz/results/')
    assert results.status_code == 200
    assert b'The Drowning Debtor' in results.content
    assert b'Collections &amp; Repo Stax' in results.content
    assert b'?plan=consult' not in results.content

    captured = client.post('/quiz/results/email/', {'email': 'jordan@example.com'})
    assert captured['Location'] == '/quiz/results/'
    lead = Lead.objects.get(email='jordan@example.com')
    assert lead.archetype == 'The Drowning Debtor'
    assert b'?plan=consult' in client.get('/quiz/results/').content

    intent = make_intent(plan='consult', email='jordan@example.com', intent_id='pi_consult')
    with patch('stripe.PaymentIntent.create', return_value=intent) as create:
        checkout = client.post('/checkout/?plan=consult', {
            'plan': 'consult', 'name': 'Jordan', 'email': 'jordan@example.com', 'password': 'Debt-free-2026',
        })
    assert checkout.status_code == 200
    assert intent.client_secret.encode() in checkout.content
    assert create.call_args.kwargs['amount'] == 29700

    user = django_user_model.objects.get(email='jordan@example.com')
    assert user.check_password('Debt-free-2026')
    assert not user.has_community_access

    paid = make_intent(plan='consult', email='jordan@example.com', intent_id='pi_consult', status='succeeded')
    with patch('stripe.PaymentIntent.retrieve', return_value=paid):
        complete = client.get('/checkout/complete/', {'payment_intent': 'pi_consult'})
    assert complete['Location'] == '/dashboard/'

    user.refresh_from_db()
    assert user.has_community_access
    assert user.has_consult_access
    assert Payment.objects.get(stripe_payment_intent_id='pi_consult').user == user
    assert client.get('/dashboard/').status_code == 200


def test_fallback_result_still_unlocks_offers(client):
    take_quiz(client)
    results = client.get('/quiz/results/')

    assert ai.DEFAULT_ANALYSIS.archetype.encode() in results.content
    client.post('/quiz/results/email/', {'email': 'sam@example.com'})
    assert Lead.objects.get(email='sam@example.com').pdf_stack == ai.DEFAULT_ANALYSIS.pdf_stack


def test_analyze_quiz_endpoint(api_client):
    answers = [{'question': q.text, 'answer': q.options[0]} for q in QUESTIONS]
    response = api_client.post('/api/analyze-quiz', {'answers': answers}, format='json')

    assert response.status_code == 200
    assert response.json() == {**ai.DEFAULT_ANALYSIS.as_response(), 'status': 'fallback'}


@pytest.mark.parametrize('payload', [{}, {'answers': 'nope'}, {'answers': [{'question': 1}]}])
def test_analyze_quiz_rejects_bad_answers(api_client, payload):
    response = api_client.post('/api/analyze-quiz', payload, format='json')
    assert response.status_code == 400
    assert response.json() == {'error': 'Invalid answers format'}


def test_checkout_with_existing_email_needs_password(client, user, stripe_configured):
    with patch('stripe.PaymentIntent.create') as create:
        response = client.post('/checkout/?plan=community', {
            'plan': 'community', 'email': user.email, 'password': 'not-their-password',
        })
    assert response.status_code == 200
    assert b'already exists' in response.content
    create.assert_not_called()


def test_checkout_unknown_plan(client):
    assert client.get('/checkout/?plan=gold').status_code == 404


def test_checkout_without_stripe_shows_error(client):
    response = client.post('/checkout/?plan=community', {
        'plan': 'community', 'email': 'new@example.com', 'password': 'Debt-free-2026',
    })
    assert response.status_code == 200
    assert b'temporarily unavailable' in response.content


def test_health(api_client):
    body = api_client.get('/api/health').json()
    assert body['status'] == 'ok'
    assert body['integrations']['Stripe'] is False
    assert body['integrations']['Database'] is True
