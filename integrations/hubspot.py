import json
import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)


class HubSpotError(Exception):
    """A non-2xx answer from HubSpot, or no answer at all."""

    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class HubSpotNotConfigured(HubSpotError):
    def __init__(self):
        super().__init__("HubSpot API key not configured", status_code=500)


class ContactNotFound(HubSpotError):
    def __init__(self, email: str):
        super().__init__("Contact not found", status_code=404)
        self.email = email


class HubSpotClient:
    """Client for the HubSpot CRM v3 objects API"""

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.HUBSPOT_API_KEY
        self.base_url = 'https://api.hubapi.com/crm/v3/objects'
        self.timeout = settings.EXTERNAL_API_TIMEOUT

    def _make_request(self, method: str, endpoint: str, payload: Dict[str, Any], error_message: str) -> Dict:
        if not self.api_key:
            raise HubSpotNotConfigured()

        headers = {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
        }
        try:
            response = requests.request(method, f"{self.base_url}/{endpoint}", headers=headers,
                                        json=payload, timeout=self.timeout)
        except RequestException as e:
            logger.error(f"HubSpot request to {endpoint} failed: {str(e)}")
            raise HubSpotError(error_message) from e

        if not response.ok:
            try:
                details = response.json()
            except ValueError:
                details = response.text
            logger.error(f"HubSpot API error on {endpoint}: {details}")
            raise HubSpotError(error_message, status_code=response.status_code, details=details)

        return response.json()

    def find_contact_id(self, email: str) -> str:
        data = self._make_request('POST', 'contacts/search', {
            'filterGroups': [{
                'filters': [{'propertyName': 'email', 'operator': 'EQ', 'value': email}]
            }]
        }, 'Failed to find contact')

        results = data.get('results') or []
        if not results:
            raise ContactNotFound(email)
        return results[0]['id']

    def create_contact(self, email: str, lead_source: Optional[str] = None, first_name: Optional[str] = None,
                       last_name: Optional[str] = None, phone: Optional[str] = None, quiz_results: Any = None,
                       purchase_amount: Any = None, purchase_type: Optional[str] = None) -> str:
        properties = {'email': email, 'lead_source': lead_source}
        if first_name:
            properties['firstname'] = first_name
        if last_name:
            properties['lastname'] = last_name
        if phone:
            properties['phone'] = phone
        if quiz_results:
            properties['quiz_results'] = json.dumps(quiz_results)
        if purchase_amount:
            properties['purchase_amount'] = str(purchase_amount)
        if purchase_type:
            properties['purchase_type'] = purchase_type

        data = self._make_request('POST', 'contacts', {'properties': properties},
                                  'Failed to create HubSpot contact')
        return data['id']

    def update_contact(self, email: str, properties: Dict[str, Any]) -> str:
        contact_id = self.find_contact_id(email)
        data = self._make_request('PATCH', f'contacts/{contact_id}', {'properties': properties},
                                  'Failed to update contact')
        return data['id']

    def create_deal(self, email: str, deal_name: str, amount: Any, deal_stage: Optional[str] = None,
                    deal_type: Optional[str] = None) -> str:
        contact_id = self.find_contact_id(email)
        data = self._make_request('POST', 'deals', {
            'properties': {
                'dealname': deal_name,
                'amount': str(amount),
                'dealstage': deal_stage,
                'deal_type': deal_type,
                'pipeline': 'default',
            },
            'associations': [{
                'to': {'id': contact_id},
                # contact-to-deal association
                'types': [{'associationCategory': 'HUBSPOT_DEFINED', 'associationTypeId': 3}],
            }],
        }, 'Failed to create deal')
        return data['id']
