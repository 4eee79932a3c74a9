import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from . import mailjet
from .hubspot import HubSpotClient, HubSpotError
from .serializers import ContactSerializer, DealSerializer, RecipientSerializer, PdfStackEmailSerializer

logger = logging.getLogger(__name__)


def _hubspot_error_response(e):
    body = {'error': str(e)}
    if e.details is not None:
        body['details'] = e.details
    return Response(body, status=e.status_code)


@api_view(['POST'])
def hubspot_create_contact(request):
    serializer = ContactSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'A valid email is required'}, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    try:
        contact_id = HubSpotClient().create_contact(
            email=data['email'],
            lead_source=data.get('leadSource'),
            first_name=data.get('firstName'),
            last_name=data.get('lastName'),
            phone=data.get('phone'),
            quiz_results=data.get('quizResults'),
            purchase_amount=data.get('purchaseAmount'),
            purchase_type=data.get('purchaseType'),
        )
    except HubSpotError as e:
        return _hubspot_error_response(e)
    except Exception:
        logger.exception("HubSpot create contact error")
        return Response({'error': 'Failed to create HubSpot contact'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'success': True, 'contactId': contact_id})


@api_view(['POST'])
def hubspot_update_contact(request):
    updates = {key: request.data.get(key) for key in request.data}
    email = updates.pop('email', None)
    if not email:
        return Response({'error': 'Email is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        contact_id = HubSpotClient().update_contact(email, updates)
    except HubSpotError as e:
        return _hubspot_error_response(e)
    except Exception:
        logger.exception("HubSpot update contact error")
        return Response({'error': 'Failed to update HubSpot contact'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'success': True, 'contactId': contact_id})


@api_view(['POST'])
def hubspot_create_deal(request):
    serializer = DealSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'email, dealName and amount are required'}, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    try:
        deal_id = HubSpotClient().create_deal(
            email=data['email'],
            deal_name=data['dealName'],
            amount=data['amount'],
            deal_stage=data.get('dealStage'),
            deal_type=data.get('dealType'),
        )
    except HubSpotError as e:
        return _hubspot_error_response(e)
    except Exception:
        logger.exception("HubSpot create deal error")
        return Response({'error': 'Failed to create HubSpot deal'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'success': True, 'dealId': deal_id})


@api_view(['POST'])
def send_pdf_stack(request):
    serializer = PdfStackEmailSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'email, archetype and pdfStack are required'}, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    sent = mailjet.send_pdf_stack_email(data['email'], data['name'], data['archetype'],
                                        data['pdfStack'], data['battlePlan'])
    if not sent:
        return Response({'error': 'Failed to send PDF stack email'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({'success': True})


@api_view(['POST'])
def send_welcome(request):
    serializer = RecipientSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'A valid email is required'}, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    if not mailjet.send_welcome_email(data['email'], data['name']):
        return Response({'error': 'Failed to send welcome email'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({'success': True})


@api_view(['POST'])
def send_consult_confirmation(request):
    serializer = RecipientSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'A valid email is required'}, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    if not mailjet.send_consult_confirmation_email(data['email'], data['name']):
        return Response({'error': 'Failed to send consultation confirmation'},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({'success': True})
