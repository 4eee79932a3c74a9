from django.urls import path
from . import views


app_name = 'funnel'

urlpatterns = [
    path('', views.landing, name='landing'),
    path('quiz/start/', views.start_quiz, name='start_quiz'),
    path('quiz/', views.quiz, name='quiz'),
    path('quiz/analyzing/', views.analyzing, name='analyzing'),
    path('quiz/results/', views.results, name='results'),
    path('quiz/results/email/', views.capture_email, name='capture_email'),
    path('checkout/', views.checkout, name='checkout'),
    path('checkout/complete/', views.payment_complete, name='payment_complete'),
]
