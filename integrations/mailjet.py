import logging
from typing import Optional

import requests
from django.conf import settings
from django.template.loader import render_to_string
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

FROM_NAME = "Debt Eraser Pro"


class MailjetClient:
    """Client for the Mailjet v3.1 send API"""

    def __init__(self, api_key: Optional[str] = None, secret_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.MAILJET_API_KEY
        self.secret_key = secret_key if secret_key is not None else settings.MAILJET_SECRET_KEY
        self.base_url = 'https://api.mailjet.com/v3.1'
        self.timeout = settings.EXTERNAL_API_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.secret_key)

    def send(self, to: str, subject: str, html: str, from_email: Optional[str] = None,
             from_name: Optional[str] = None) -> bool:
        """
        Send one HTML email.

        Returns False instead of raising when the keys are missing or Mailjet
        rejects the request, so callers can treat email as best effort.
        """
        if not self.is_configured:
            logger.error("Mailjet API keys not configured")
            return False

        payload = {
            'Messages': [
                {
                    'From': {
                        'Email': from_email or settings.FROM_EMAIL,
                        'Name': from_name or FROM_NAME,
                    },
                    'To': [{'Email': to}],
                    'Subject': subject,
                    'HTMLPart': html,
                }
            ]
        }

        try:
            response = requests.post(
                f"{self.base_url}/send",
                json=payload,
                auth=(self.api_key, self.secret_key),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except RequestException as e:
            logger.error(f"Mailjet send to {to} failed: {str(e)}")
            return False

        logger.info(f"Email '{subject}' sent to {to} via Mailjet")
        return True


def stack_download_url(pdf_stack: str) -> str:
    slug = "-".join(pdf_stack.split()).lower()
    return f"{settings.SITE_URL}/pdfs/{slug}.zip"


def send_pdf_stack_email(email, name, archetype, pdf_stack, battle_plan, client=None) -> bool:
    """Send the recommended stack right after the quiz."""
    html = render_to_string('integrations/email/pdf_stack.html', {
        'name': name or 'there',
        'archetype': archetype,
        'pdf_stack': pdf_stack,
        'battle_plan': battle_plan,
        'download_url': stack_download_url(pdf_stack),
        'site_url': settings.SITE_URL,
    })
    return (client or MailjetClient()).send(email, f"Your {pdf_stack} is Ready! 📄", html)


def send_welcome_email(email, name, client=None) -> bool:
    html = render_to_string('integrations/email/welcome.html', {
        'name': name,
        'site_url': settings.SITE_URL,
    })
    return (client or MailjetClient()).send(email, "Welcome to Debt Eraser Pro Community! 🎉", html)


def send_consult_confirmation_email(email, name, client=None) -> bool:
    html = render_to_string('integrations/email/consult_confirmation.html', {
        'name': name,
        'site_url': settings.SITE_URL,
    })
    return (client or MailjetClient()).send(email, "Your Consultation is Confirmed! ✅", html)
