from django.urls import path
from . import api_views

urlpatterns = [
    path('hubspot/create-contact', api_views.hubspot_create_contact, name='hubspot_create_contact'),
    path('hubspot/update-contact', api_views.hubspot_update_contact, name='hubspot_update_contact'),
    path('hubspot/create-deal', api_views.hubspot_create_deal, name='hubspot_create_deal'),
    path('email/send-pdf-stack', api_views.send_pdf_stack, name='email_send_pdf_stack'),
    path('email/send-welcome', api_views.send_welcome, name='email_send_welcome'),
    path('email/send-consult-confirmation', api_views.send_consult_confirmation,
         name='email_send_consult_confirmation'),
]
