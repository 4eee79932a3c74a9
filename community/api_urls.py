from django.urls import path

from . import api_views

urlpatterns = [
    path('community/posts', api_views.community_posts, name='api_community_posts'),
    path('community/posts/<int:post_id>/like', api_views.like_post, name='api_like_post'),
    path('community/posts/<int:post_id>/comments', api_views.post_comments, name='api_post_comments'),
    path('modules', api_views.modules, name='api_modules'),
    path('vault/resources', api_views.vault_resources, name='api_vault_resources'),
    path('vault/resources/<int:resource_id>', api_views.vault_resource_detail, name='api_vault_resource'),
    path('calendar/events', api_views.calendar_events, name='api_calendar_events'),
    path('messenger/conversations', api_views.conversations, name='api_conversations'),
    path('messenger/conversations/<int:conversation_id>/messages', api_views.conversation_messages,
         name='api_conversation_messages'),
    path('messenger/messages', api_views.send_message, name='api_send_message'),
]
