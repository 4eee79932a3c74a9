"""
Shared fixtures. Every external service starts unconfigured so nothing in the
suite can reach the network unless a test patches the client in.
"""
from types import SimpleNamespace

import pytest
import stripe
from django.core.cache import caches
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def offline_settings(settings, tmp_path):
    settings.OPENAI_API_KEY = ''
    settings.STRIPE_SECRET_KEY = ''
    settings.STRIPE_WEBHOOK_SECRET = ''
    settings.HUBSPOT_API_KEY = ''
    settings.MAILJET_API_KEY = ''
    settings.MAILJET_SECRET_KEY = ''
    settings.ANALYSIS_MIN_DISPLAY_SECONDS = 0
    settings.VAULT_DIR = tmp_path / 'vault'
    caches['chat'].clear()
    return settings


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(email='member@example.com', password='Str0ng-pass!', name='Member')


@pytest.fixture
def member(user):
    user.has_community_access = True
    user.membership_type = user.MEMBERSHIP_COMMUNITY
    user.save()
    return user


@pytest.fixture
def stripe_configured(settings):
    settings.STRIPE_SECRET_KEY = 'sk_test_123'
    settings.STRIPE_PUBLISHABLE_KEY = 'pk_test_123'
    return settings


def make_intent(plan='community', email='buyer@example.com', status='requires_payment_method',
                intent_id='pi_test_1', amount=None):
    from funnel.payments import PLANS
    return stripe.PaymentIntent.construct_from({
        'id': intent_id,
        'object': 'payment_intent',
        'amount': amount if amount is not None else PLANS[plan],
        'currency': 'usd',
        'status': status,
        'client_secret': f'{intent_id}_secret_abc',
        'metadata': {'plan': plan, 'email': email},
    }, 'sk_test_123')


def completion(content):
    """The slice of an OpenAI chat completion the code reads."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])
