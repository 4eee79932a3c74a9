from django.conf import settings


def integration_status():
    """Which downstream services have credentials, keyed by display name."""
    return {
        'Stripe': bool(settings.STRIPE_SECRET_KEY),
        'OpenAI': bool(settings.OPENAI_API_KEY),
        'HubSpot CRM': bool(settings.HUBSPOT_API_KEY),
        'Mailjet Email': bool(settings.MAILJET_API_KEY and settings.MAILJET_SECRET_KEY),
        'Database': bool(settings.DATABASES.get('default', {}).get('NAME')),
    }
