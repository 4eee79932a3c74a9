from django.urls import path
from . import views


app_name = 'community'

urlpatterns = [
    path('', views.dashboard, name='dashboard'),
    path('war-room/', views.war_room_chat, name='war_room_chat'),
    path('messenger/<int:conversation_id>/reply/', views.reply, name='reply'),
    path('<slug:tab>/', views.dashboard, name='dashboard_tab'),
]
