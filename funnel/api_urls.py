from django.urls import path

from . import api_views

urlpatterns = [
    path('health', api_views.health, name='api_health'),
    path('analyze-quiz', api_views.analyze_quiz, name='api_analyze_quiz'),
    path('chat', api_views.chat, name='api_chat'),
    path('create-payment-intent', api_views.create_payment_intent, name='api_create_payment_intent'),
    path('verify-payment', api_views.verify_payment, name='api_verify_payment'),
    path('stripe/webhook', api_views.stripe_webhook, name='api_stripe_webhook'),
]
